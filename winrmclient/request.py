"""Builders for the SOAP requests of the WinRM shell protocol."""

from __future__ import annotations

import base64
import uuid
from typing import Iterable, Optional

from winrmclient.parameters import DEFAULT_PARAMETERS, Parameters
from winrmclient.soap.header import HeaderOption, SoapHeader
from winrmclient.soap.message import SoapMessage
from winrmclient.soap.namespaces import WIN_SHELL

ANONYMOUS_REPLY_TO = "http://schemas.xmlsoap.org/ws/2004/08/addressing/role/anonymous"
RESOURCE_URI_CMD = "http://schemas.microsoft.com/wbem/wsman/1/windows/shell/cmd"
ACTION_CREATE = "http://schemas.xmlsoap.org/ws/2004/09/transfer/Create"
ACTION_DELETE = "http://schemas.xmlsoap.org/ws/2004/09/transfer/Delete"
ACTION_COMMAND = "http://schemas.microsoft.com/wbem/wsman/1/windows/shell/Command"
ACTION_RECEIVE = "http://schemas.microsoft.com/wbem/wsman/1/windows/shell/Receive"
ACTION_SEND = "http://schemas.microsoft.com/wbem/wsman/1/windows/shell/Send"
ACTION_SIGNAL = "http://schemas.microsoft.com/wbem/wsman/1/windows/shell/Signal"
SIGNAL_TERMINATE = "http://schemas.microsoft.com/wbem/wsman/1/windows/shell/signal/terminate"


def _message_id() -> str:
    return f"uuid:{uuid.uuid4()}"


def _cdata(text: str) -> str:
    return f"<![CDATA[{text}]]>"


def _default_headers(message: SoapMessage, uri: str, params: Optional[Parameters]) -> SoapHeader:
    params = params or DEFAULT_PARAMETERS
    return (
        message.header()
        .to(uri)
        .reply_to(ANONYMOUS_REPLY_TO)
        .max_envelope_size(params.envelope_size)
        .message_id(_message_id())
        .locale(params.locale)
        .timeout(params.timeout)
    )


def open_shell_request(uri: str, params: Optional[Parameters] = None) -> SoapMessage:
    """Build the request that creates a remote cmd shell."""
    message = SoapMessage()
    (
        _default_headers(message, uri, params)
        .action(ACTION_CREATE)
        .resource_uri(RESOURCE_URI_CMD)
        .add_option(HeaderOption("WINRS_NOPROFILE", "FALSE"))
        .add_option(HeaderOption("WINRS_CODEPAGE", "65001"))
        .build()
    )
    body = message.create_body_element("Shell", WIN_SHELL)
    message.create_element(body, "InputStreams", WIN_SHELL).set_content("stdin")
    message.create_element(body, "OutputStreams", WIN_SHELL).set_content("stdout stderr")
    return message


def delete_shell_request(uri: str, shell_id: str, params: Optional[Parameters] = None) -> SoapMessage:
    """Build the request that deletes the shell ``shell_id``."""
    message = SoapMessage()
    (
        _default_headers(message, uri, params)
        .action(ACTION_DELETE)
        .shell_id(shell_id)
        .resource_uri(RESOURCE_URI_CMD)
        .build()
    )
    message.new_body()
    return message


def execute_command_request(
    uri: str,
    shell_id: str,
    command: str,
    arguments: Iterable[str] = (),
    params: Optional[Parameters] = None,
) -> SoapMessage:
    """Build the request that starts ``command`` with ``arguments`` in a shell."""
    message = SoapMessage()
    (
        _default_headers(message, uri, params)
        .action(ACTION_COMMAND)
        .resource_uri(RESOURCE_URI_CMD)
        .shell_id(shell_id)
        .add_option(HeaderOption("WINRS_CONSOLEMODE_STDIN", "TRUE"))
        .add_option(HeaderOption("WINRS_SKIP_CMD_SHELL", "FALSE"))
        .build()
    )
    body = message.create_body_element("CommandLine", WIN_SHELL)
    # CDATA keeps characters such as & from breaking the XML.
    message.create_element(body, "Command", WIN_SHELL).set_content(_cdata(command))
    for argument in arguments:
        message.create_element(body, "Arguments", WIN_SHELL).set_content(_cdata(argument))
    return message


def get_output_request(
    uri: str,
    shell_id: str,
    command_id: str,
    streams: str,
    params: Optional[Parameters] = None,
) -> SoapMessage:
    """Build the request that receives output of ``streams`` from a command."""
    message = SoapMessage()
    (
        _default_headers(message, uri, params)
        .action(ACTION_RECEIVE)
        .resource_uri(RESOURCE_URI_CMD)
        .shell_id(shell_id)
        .build()
    )
    receive = message.create_body_element("Receive", WIN_SHELL)
    desired = message.create_element(receive, "DesiredStream", WIN_SHELL)
    desired.set_attr("CommandId", command_id)
    desired.set_content(streams)
    return message


def send_input_request(
    uri: str,
    shell_id: str,
    command_id: str,
    data: bytes,
    eof: bool = False,
    params: Optional[Parameters] = None,
) -> SoapMessage:
    """Build the request that sends ``data`` to a command's stdin."""
    message = SoapMessage()
    (
        _default_headers(message, uri, params)
        .action(ACTION_SEND)
        .resource_uri(RESOURCE_URI_CMD)
        .shell_id(shell_id)
        .build()
    )
    send = message.create_body_element("Send", WIN_SHELL)
    stream = message.create_element(send, "Stream", WIN_SHELL)
    stream.set_attr("Name", "stdin")
    stream.set_attr("CommandId", command_id)
    stream.set_content(base64.b64encode(bytes(data)).decode("ascii"))
    if eof:
        stream.set_attr("End", "true")
    return message


def signal_request(
    uri: str, shell_id: str, command_id: str, params: Optional[Parameters] = None
) -> SoapMessage:
    """Build the request that terminates a running command."""
    message = SoapMessage()
    (
        _default_headers(message, uri, params)
        .action(ACTION_SIGNAL)
        .resource_uri(RESOURCE_URI_CMD)
        .shell_id(shell_id)
        .build()
    )
    signal = message.create_body_element("Signal", WIN_SHELL)
    signal.set_attr("CommandId", command_id)
    message.create_element(signal, "Code", WIN_SHELL).set_content(SIGNAL_TERMINATE)
    return message