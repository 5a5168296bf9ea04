"""Parsers for the SOAP responses of the WinRM shell protocol."""

from __future__ import annotations

import base64
import binascii
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from winrmclient.errors import ExecuteCommandError, WinRMError
from winrmclient.soap.namespaces import NS_WIN_SHELL, get_all_xpath_namespaces

COMMAND_RESPONSE_ACTION = "http://schemas.microsoft.com/wbem/wsman/1/windows/shell/CommandResponse"
COMMAND_STATE_DONE = "http://schemas.microsoft.com/wbem/wsman/1/windows/shell/CommandState/Done"

_NAMESPACES = get_all_xpath_namespaces()
_STREAM_TAG = f"{{{NS_WIN_SHELL}}}Stream"


@dataclass(frozen=True)
class ReceiveResult:
    """Output received from a command, keyed by stream name."""

    finished: bool
    exit_code: int = 0
    streams: dict[str, bytes] = field(default_factory=dict)

    @property
    def stdout(self) -> bytes:
        return self.streams.get("stdout", b"")

    @property
    def stderr(self) -> bytes:
        return self.streams.get("stderr", b"")


def _parse(response: str) -> ET.Element:
    try:
        return ET.fromstring(response)
    except ET.ParseError as exc:
        raise WinRMError(f"parsing xml response: {exc}") from exc


def _first(root: ET.Element, path: str) -> str:
    node = root.find(path, _NAMESPACES)
    return "" if node is None else "".join(node.itertext())


def _decode(text: str) -> bytes:
    try:
        return base64.b64decode(text)
    except (binascii.Error, ValueError):
        return b""


def _stream_data(root: ET.Element, name: str) -> bytes:
    return b"".join(
        _decode("".join(node.itertext()))
        for node in root.iter(_STREAM_TAG)
        if node.get("Name") == name
    )


def _state(root: ET.Element) -> tuple[bool, int]:
    finished = any(node.get("State") == COMMAND_STATE_DONE for node in root.iter())
    exit_code = 0
    if finished and root.find(".//rsp:ExitCode", _NAMESPACES) is not None:
        try:
            exit_code = int(_first(root, ".//rsp:ExitCode"))
        except ValueError:
            exit_code = 0
    return finished, exit_code


def parse_open_shell_response(response: str) -> str:
    """Return the shell id of a create-shell response, or "" if it has none."""
    return _first(_parse(response), ".//w:Selector[@Name='ShellId']")


def parse_execute_command_response(response: str) -> str:
    """Return the command id of a command response.

    Raises ExecuteCommandError, holding the raw body, for anything else.
    """
    try:
        root = _parse(response)
    except WinRMError as exc:
        raise ExecuteCommandError(exc, response) from exc

    action = _first(root, ".//a:Action")
    if action != COMMAND_RESPONSE_ACTION:
        raise ExecuteCommandError(WinRMError(f"unsupported action: {action}"), response)
    return _first(root, ".//rsp:CommandId")


def parse_output_response(response: str) -> ReceiveResult:
    """Decode the stdout and stderr data and the state of a receive response."""
    root = _parse(response)
    finished, exit_code = _state(root)
    streams = {name: _stream_data(root, name) for name in ("stdout", "stderr")}
    return ReceiveResult(finished, exit_code, streams)


def parse_stream_output_response(response: str, stream_type: str) -> ReceiveResult:
    """Decode a single stream and the state of a receive response."""
    root = _parse(response)
    finished, exit_code = _state(root)
    return ReceiveResult(finished, exit_code, {stream_type: _stream_data(root, stream_type)})