import pytest

from winrmclient.errors import ExecuteCommandError, WinRMError
from winrmclient.response import (
    ReceiveResult,
    parse_execute_command_response,
    parse_open_shell_response,
    parse_output_response,
    parse_stream_output_response,
)

NAMESPACES = {
    "s": "http://www.w3.org/2003/05/soap-envelope",
    "a": "http://schemas.xmlsoap.org/ws/2004/08/addressing",
    "x": "http://schemas.xmlsoap.org/ws/2004/09/transfer",
    "w": "http://schemas.dmtf.org/wbem/wsman/1/wsman.xsd",
    "rsp": "http://schemas.microsoft.com/wbem/wsman/1/windows/shell",
    "p": "http://schemas.microsoft.com/wbem/wsman/1/wsman.xsd",
}
SHELL_URI = NAMESPACES["rsp"]
FAULT_NS = "http://schemas.microsoft.com/wbem/wsman/1/wsmanfault"
ANONYMOUS = NAMESPACES["a"] + "/role/anonymous"
FAULT_ACTION = "http://schemas.dmtf.org/wbem/wsman/1/wsman/fault"
STATE_RUNNING = SHELL_URI + "/CommandState/Running"
STATE_DONE = SHELL_URI + "/CommandState/Done"

SHELL_ID = "00000000-0000-0000-0000-00000000AAAA"
COMMAND_ID = "00000000-0000-0000-0000-00000000BBBB"

STDOUT_B64 = "VGhhdCdzIGFsbCBmb2xrcyEhIQ=="
STDERR_B64 = "VGhpcyBpcyBzdGRlcnIsIEknbSBwcmV0dHkgc3VyZSE="


def _envelope(action, body, prefixes=("s", "a", "x", "w", "rsp", "p")):
    declarations = " ".join(f'xmlns:{prefix}="{NAMESPACES[prefix]}"' for prefix in prefixes)
    return (
        f'<s:Envelope xml:lang="en-US" {declarations}>'
        f"<s:Header><a:Action>{action}</a:Action>"
        "<a:MessageID>uuid:00000000-0000-0000-0000-000000000001</a:MessageID>"
        f"<a:To>{ANONYMOUS}</a:To></s:Header>"
        f"<s:Body>{body}</s:Body></s:Envelope>"
    )


def _stream(name, content):
    return f'<rsp:Stream Name="{name}" CommandId="{COMMAND_ID}">{content}</rsp:Stream>'


def _state(state, inner=""):
    return f'<rsp:CommandState CommandId="{COMMAND_ID}" State="{state}">{inner}</rsp:CommandState>'


def _receive(*parts):
    return _envelope(SHELL_URI + "/ReceiveResponse", "<rsp:ReceiveResponse>" + "".join(parts) + "</rsp:ReceiveResponse>")


CREATE_SHELL_RESPONSE = _envelope(
    NAMESPACES["x"] + "/CreateResponse",
    "<x:ResourceCreated>"
    "<a:Address>http://192.0.2.10:5985/wsman</a:Address>"
    "<a:ReferenceParameters>"
    f"<w:ResourceURI>{SHELL_URI}/cmd</w:ResourceURI>"
    f'<w:SelectorSet><w:Selector Name="ShellId">{SHELL_ID}</w:Selector></w:SelectorSet>'
    "</a:ReferenceParameters>"
    "</x:ResourceCreated>"
    f"<rsp:Shell><rsp:ShellId>{SHELL_ID}</rsp:ShellId><rsp:InputStreams>stdin</rsp:InputStreams></rsp:Shell>",
)

EXECUTE_COMMAND_RESPONSE = _envelope(
    SHELL_URI + "/CommandResponse",
    f"<rsp:CommandResponse><rsp:CommandId>{COMMAND_ID}</rsp:CommandId></rsp:CommandResponse>",
)

EXECUTE_COMMAND_RESPONSE_WITH_ERROR = _envelope(
    FAULT_ACTION,
    "<s:Fault><s:Code><s:Value>s:Receiver</s:Value>"
    "<s:Subcode><s:Value>w:InternalError</s:Value></s:Subcode></s:Code>"
    '<s:Reason><s:Text xml:lang="">The filename or extension is too long.</s:Text></s:Reason>'
    f'<s:Detail><f:WSManFault xmlns:f="{FAULT_NS}" Code="1" Machine="192.0.2.30">'
    "<f:Message>The filename or extension is too long.</f:Message>"
    "</f:WSManFault></s:Detail></s:Fault>",
    prefixes=("s", "a", "x", "w", "p"),
)

OUTPUT_RESPONSE = _receive(_stream("stdout", STDOUT_B64), _stream("stderr", STDERR_B64), _state(STATE_RUNNING))
SINGLE_OUTPUT_RESPONSE = _receive(_stream("stdout", STDOUT_B64), _state(STATE_RUNNING))
DONE_COMMAND_RESPONSE = _receive(_state(STATE_DONE, "<rsp:ExitCode>123</rsp:ExitCode>")) + "\n\t"
DONE_COMMAND_EXIT_CODE_0_RESPONSE = _receive(_state(STATE_DONE, "<rsp:ExitCode>0</rsp:ExitCode>"))


def test_open_shell_response():
    assert parse_open_shell_response(CREATE_SHELL_RESPONSE) == SHELL_ID


def test_open_shell_response_without_selector():
    assert parse_open_shell_response(EXECUTE_COMMAND_RESPONSE) == ""


def test_open_shell_response_malformed():
    with pytest.raises(WinRMError):
        parse_open_shell_response("<s:Envelope")


def test_execute_command_response():
    assert parse_execute_command_response(EXECUTE_COMMAND_RESPONSE) == COMMAND_ID


def test_execute_command_response_error():
    with pytest.raises(ExecuteCommandError) as info:
        parse_execute_command_response(EXECUTE_COMMAND_RESPONSE_WITH_ERROR)
    assert info.value.body == EXECUTE_COMMAND_RESPONSE_WITH_ERROR
    assert str(info.value) == "unsupported action: " + FAULT_ACTION


def test_execute_command_response_malformed():
    with pytest.raises(ExecuteCommandError) as info:
        parse_execute_command_response("not xml <")
    assert info.value.body == "not xml <"
    assert str(info.value).startswith("parsing xml response:")


def test_slurp_output_response():
    result = parse_output_response(OUTPUT_RESPONSE)
    assert result.finished is False
    assert result.stdout == b"That's all folks!!!"
    assert result.stderr == b"This is stderr, I'm pretty sure!"


def test_slurp_output_single_response():
    result = parse_stream_output_response(SINGLE_OUTPUT_RESPONSE, "stdout")
    assert result.finished is False
    assert result.streams["stdout"] == b"That's all folks!!!"


def test_stream_output_picks_only_requested_stream():
    result = parse_stream_output_response(OUTPUT_RESPONSE, "stderr")
    assert result.streams == {"stderr": b"This is stderr, I'm pretty sure!"}
    assert result.stdout == b""


def test_done_slurp_output_response():
    result = parse_output_response(DONE_COMMAND_RESPONSE)
    assert result.finished is True
    assert result.exit_code == 123
    assert result.stdout == b""
    assert result.stderr == b""


def test_done_response_with_exit_code_zero():
    result = parse_output_response(DONE_COMMAND_EXIT_CODE_0_RESPONSE)
    assert result == ReceiveResult(True, 0, {"stdout": b"", "stderr": b""})


def test_running_response_has_no_exit_code():
    assert parse_output_response(OUTPUT_RESPONSE).exit_code == 0


def test_output_response_malformed():
    with pytest.raises(WinRMError):
        parse_output_response("<broken")