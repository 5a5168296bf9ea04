from winrmclient.endpoint import Endpoint


def test_endpoint_url_http():
    endpoint = Endpoint(host="abc", port=123)
    assert endpoint.url() == "http://abc:123/wsman"


def test_endpoint_url_https():
    endpoint = Endpoint(host="abc", port=123, https=True)
    assert endpoint.url() == "https://abc:123/wsman"


def test_endpoint_with_default_timeout():
    endpoint = Endpoint("test", 5585, False, False, None, None, None, 0)
    assert endpoint.timeout == 60.0


def test_endpoint_with_timeout():
    endpoint = Endpoint("test", 5585, False, False, None, None, None, 120)
    assert endpoint.timeout == 120


def test_endpoint_keeps_tls_material():
    endpoint = Endpoint("test", 5986, https=True, ca_cert=b"ca", cert=b"cert", key=b"key")
    assert (endpoint.ca_cert, endpoint.cert, endpoint.key) == (b"ca", b"cert", b"key")
    assert endpoint.url() == "https://test:5986/wsman"