"""HTTP transports that carry SOAP messages to a WinRM service."""

from __future__ import annotations

import base64
import functools
import http.client
import os
import socket
import ssl
import tempfile
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional

from winrmclient.endpoint import Endpoint
from winrmclient.errors import WinRMError
from winrmclient.soap.message import SoapMessage

SOAP_XML = "application/soap+xml"
MUTUAL_AUTH = "http://schemas.dmtf.org/wbem/wsman/1/wsman/secprofile/https/mutual"
CONNECT_TIMEOUT = 30.0

Dial = Callable[[tuple], socket.socket]


class TransportTimeout(WinRMError, TimeoutError):
    """The server did not answer in time."""


class Transporter(ABC):
    """Sends a SOAP message to the client's URL and returns the response body."""

    @abstractmethod
    def configure(self, endpoint: Endpoint) -> None:
        """Prepare the transport for ``endpoint``."""

    @abstractmethod
    def post(self, client: Any, request: SoapMessage) -> str:
        """Send ``request`` and return the SOAP response body."""


def _connect(conn: http.client.HTTPConnection, dial: Optional[Dial]) -> socket.socket:
    address = (conn.host, conn.port)
    if dial is None:
        return socket.create_connection(address, CONNECT_TIMEOUT)
    return dial(address)


class _DialHTTPConnection(http.client.HTTPConnection):
    def __init__(self, host: str, *, dial: Optional[Dial] = None, **kwargs: Any) -> None:
        super().__init__(host, **kwargs)
        self._dial = dial

    def connect(self) -> None:
        self.sock = _connect(self, self._dial)
        if self.timeout is not None and self.timeout is not socket._GLOBAL_DEFAULT_TIMEOUT:
            self.sock.settimeout(self.timeout)


class _DialHTTPSConnection(http.client.HTTPSConnection):
    def __init__(
        self,
        host: str,
        *,
        dial: Optional[Dial] = None,
        server_name: str = "",
        context: Optional[ssl.SSLContext] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(host, context=context, **kwargs)
        self._dial = dial
        self._server_name = server_name
        self._ssl_context = context or ssl.create_default_context()

    def connect(self) -> None:
        sock = _connect(self, self._dial)
        if self.timeout is not None and self.timeout is not socket._GLOBAL_DEFAULT_TIMEOUT:
            sock.settimeout(self.timeout)
        self.sock = self._ssl_context.wrap_socket(
            sock, server_hostname=self._server_name or self.host
        )


class _HTTPHandler(urllib.request.HTTPHandler):
    def __init__(self, dial: Optional[Dial]) -> None:
        super().__init__()
        self._dial = dial

    def http_open(self, req: urllib.request.Request) -> Any:
        return self.do_open(functools.partial(_DialHTTPConnection, dial=self._dial), req)


class _HTTPSHandler(urllib.request.HTTPSHandler):
    def __init__(self, dial: Optional[Dial], context: ssl.SSLContext, server_name: str) -> None:
        super().__init__(context=context)
        self._dial = dial
        self._context = context
        self._server_name = server_name

    def https_open(self, req: urllib.request.Request) -> Any:
        connection = functools.partial(
            _DialHTTPSConnection, dial=self._dial, server_name=self._server_name
        )
        return self.do_open(connection, req, context=self._context)


def _tls_context(endpoint: Endpoint) -> ssl.SSLContext:
    context = ssl.create_default_context()
    if endpoint.ca_cert:
        try:
            context.load_verify_locations(cadata=endpoint.ca_cert.decode("ascii"))
        except (ssl.SSLError, ValueError, UnicodeDecodeError) as exc:
            raise WinRMError("unable to read certificates") from exc
    if endpoint.insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def _load_cert_chain(context: ssl.SSLContext, cert: Optional[bytes], key: Optional[bytes]) -> None:
    if not cert or not key:
        raise WinRMError("can't parse this key and certs: missing certificate or key")
    with tempfile.TemporaryDirectory() as directory:
        cert_path = os.path.join(directory, "cert.pem")
        key_path = os.path.join(directory, "key.pem")
        with open(cert_path, "wb") as handle:
            handle.write(cert)
        with open(key_path, "wb") as handle:
            handle.write(key)
        try:
            context.load_cert_chain(cert_path, key_path)
        except (ssl.SSLError, ValueError) as exc:
            raise WinRMError(f"can't parse this key and certs: {exc}") from exc


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, (socket.timeout, TimeoutError)):
        return True
    return isinstance(exc, urllib.error.URLError) and isinstance(
        exc.reason, (socket.timeout, TimeoutError)
    )


class HttpTransport(Transporter):
    """Plain HTTP(S) transport with basic authentication."""

    def __init__(
        self, dial: Optional[Dial] = None, proxies: Optional[Mapping[str, str]] = None
    ) -> None:
        self.dial = dial
        self.proxies = dict(proxies) if proxies is not None else None
        self._opener: Optional[urllib.request.OpenerDirector] = None
        self._timeout: Optional[float] = None

    def _context(self, endpoint: Endpoint) -> ssl.SSLContext:
        return _tls_context(endpoint)

    def configure(self, endpoint: Endpoint) -> None:
        context = self._context(endpoint)
        proxy = urllib.request.ProxyHandler(self.proxies)
        self._opener = urllib.request.build_opener(
            proxy,
            _HTTPHandler(self.dial),
            _HTTPSHandler(self.dial, context, endpoint.tls_server_name),
        )
        self._timeout = endpoint.timeout

    def _auth_header(self, client: Any) -> str:
        credentials = f"{client.username}:{client.password}".encode("utf-8")
        return "Basic " + base64.b64encode(credentials).decode("ascii")

    def post(self, client: Any, request: SoapMessage) -> str:
        if self._opener is None:
            raise WinRMError("transport is not configured")
        req = urllib.request.Request(
            client.url,
            data=str(request).encode("utf-8"),
            method="POST",
            headers={
                "Content-Type": SOAP_XML + ";charset=UTF-8",
                "Authorization": self._auth_header(client),
            },
        )
        try:
            response = self._opener.open(req, timeout=self._timeout)
        except urllib.error.HTTPError as exc:
            response = exc
        except (urllib.error.URLError, OSError) as exc:
            if _is_timeout(exc):
                raise TransportTimeout(f"unknown error: timeout: {exc}") from exc
            raise WinRMError(f"unknown error {exc}") from exc

        with response:
            status = response.getcode()
            if SOAP_XML not in (response.headers.get("Content-Type") or ""):
                raise WinRMError(f"http response error: {status} - invalid content type")
            try:
                body = response.read().decode("utf-8")
            except OSError as exc:
                if _is_timeout(exc):
                    raise TransportTimeout(f"timeout while reading body: {exc}") from exc
                raise WinRMError(
                    f"http response error: {status} - error while reading request body {exc}"
                ) from exc
        if status != 200:
            raise WinRMError(f"http error {status}: {body}")
        return body


class CertificateTransport(HttpTransport):
    """HTTPS transport authenticating with a client certificate."""

    def _context(self, endpoint: Endpoint) -> ssl.SSLContext:
        context = _tls_context(endpoint)
        _load_cert_chain(context, endpoint.cert, endpoint.key)
        return context

    def configure(self, endpoint: Endpoint) -> None:
        super().configure(endpoint)

    def _auth_header(self, client: Any) -> str:
        return MUTUAL_AUTH

    def post(self, client: Any, request: SoapMessage) -> str:
        return super().post(client, request)