"""Wrapping PowerShell scripts into an encoded command line."""

from __future__ import annotations

import base64

_PREAMBLE = "$ProgressPreference = 'SilentlyContinue';"


def powershell(command: str) -> str:
    """Return a ``powershell.exe`` command line running ``command``.

    Progress bars are disabled, since they are reported on stderr. Raises
    ValueError if the script cannot be encoded as UTF-16.
    """
    script = _PREAMBLE + command
    try:
        encoded = script.encode("utf-16-le")
    except UnicodeEncodeError as exc:
        raise ValueError("cannot encode the given command") from exc
    return "powershell.exe -EncodedCommand " + base64.b64encode(encoded).decode("ascii")