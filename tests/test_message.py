from winrmclient.soap.header import HeaderOption
from winrmclient.soap.message import SoapMessage
from winrmclient.soap.namespaces import WIN_SHELL

SOAP_ENV_URI = "http://www.w3.org/2003/05/soap-envelope"
ADDRESSING_URI = "http://schemas.xmlsoap.org/ws/2004/08/addressing"
WIN_SHELL_URI = "http://schemas.microsoft.com/wbem/wsman/1/windows/shell"
WSMAN_DMTF_URI = "http://schemas.dmtf.org/wbem/wsman/1/wsman.xsd"
WSMAN_MSFT_URI = "http://schemas.microsoft.com/wbem/wsman/1/wsman.xsd"

ANONYMOUS = ADDRESSING_URI + "/role/anonymous"
CMD_URI = WIN_SHELL_URI + "/cmd"
CREATE_ACTION = "http://schemas.xmlsoap.org/ws/2004/09/transfer/Create"

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8" ?>'
NS_DECLARATIONS = " ".join(
    f'xmlns:{prefix}="{uri}"'
    for prefix, uri in (
        ("env", SOAP_ENV_URI),
        ("a", ADDRESSING_URI),
        ("rsp", WIN_SHELL_URI),
        ("w", WSMAN_DMTF_URI),
        ("p", WSMAN_MSFT_URI),
    )
)
MU_TRUE = ' mustUnderstand="true"'
MU_FALSE = ' mustUnderstand="false"'


def _el(prefix, name, text, attrs=""):
    return f"<{prefix}:{name}{attrs}>{text}</{prefix}:{name}>"


def _expected():
    rows = [
        (0, f"<env:Envelope {NS_DECLARATIONS}>"),
        (1, "<env:Header>"),
        (2, _el("a", "To", "http://winrm:5985/wsman")),
        (2, "<a:ReplyTo>"),
        (3, _el("a", "Address", ANONYMOUS, MU_TRUE)),
        (2, "</a:ReplyTo>"),
        (2, _el("w", "MaxEnvelopeSize", "153600", MU_TRUE)),
        (2, _el("w", "OperationTimeout", "PT60S")),
        (2, _el("a", "MessageID", "1-2-3-4")),
        (2, f'<w:Locale{MU_FALSE} xml:lang="en_US"/>'),
        (2, f'<p:DataLocale{MU_FALSE} xml:lang="en_US"/>'),
        (2, _el("a", "Action", CREATE_ACTION, MU_TRUE)),
        (2, _el("w", "ResourceURI", CMD_URI, MU_TRUE)),
        (2, "<w:OptionSet>"),
        (3, _el("w", "Option", "FALSE", ' Name="WINRS_NOPROFILE"')),
        (3, _el("w", "Option", "65001", ' Name="WINRS_CODEPAGE"')),
        (2, "</w:OptionSet>"),
        (1, "</env:Header>"),
        (1, "<env:Body>"),
        (2, "<rsp:Shell>"),
        (3, _el("rsp", "InputStreams", "stdin")),
        (3, _el("rsp", "OutputStreams", "stdout stderr")),
        (2, "</rsp:Shell>"),
        (1, "</env:Body>"),
        (0, "</env:Envelope>"),
    ]
    return XML_DECLARATION + "\n" + "".join("  " * depth + text + "\n" for depth, text in rows)


def test_new_message():
    message = SoapMessage()
    message.document.pretty_print = True
    (
        message.header()
        .to("http://winrm:5985/wsman")
        .reply_to(ANONYMOUS)
        .max_envelope_size(153600)
        .message_id("1-2-3-4")
        .locale("en_US")
        .timeout("PT60S")
        .action(CREATE_ACTION)
        .resource_uri(CMD_URI)
        .add_option(HeaderOption("WINRS_NOPROFILE", "FALSE"))
        .add_option(HeaderOption("WINRS_CODEPAGE", "65001"))
        .build()
    )

    body = message.create_body_element("Shell", WIN_SHELL)
    message.create_element(body, "InputStreams", WIN_SHELL).set_content("stdin")
    message.create_element(body, "OutputStreams", WIN_SHELL).set_content("stdout stderr")

    assert str(message) == _expected()


def test_header_is_cached():
    message = SoapMessage()
    message.header().to("http://target.example.com/wsman")
    message.header().action("urn:cached-action")
    message.header().build()
    text = str(message)
    assert "<a:To>http://target.example.com/wsman</a:To>" in text
    assert '<a:Action mustUnderstand="true">urn:cached-action</a:Action>' in text


def test_body_created_once():
    message = SoapMessage()
    message.create_body_element("A", WIN_SHELL)
    message.create_body_element("B", WIN_SHELL)
    bodies = [child for child in message.envelope.children if child.name == "Body"]
    assert len(bodies) == 1
    assert [child.name for child in bodies[0].children] == ["A", "B"]


def test_compact_empty_message():
    message = SoapMessage()
    message.new_body()
    assert str(message) == (
        XML_DECLARATION + f"<env:Envelope {NS_DECLARATIONS}>" + "<env:Body/></env:Envelope>"
    )