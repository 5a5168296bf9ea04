"""Exceptions raised by the WinRM client."""

from __future__ import annotations

from typing import Optional


class WinRMError(Exception):
    """A generic WinRM failure carrying a message."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ExecuteCommandError(WinRMError):
    """Starting a command failed; ``body`` holds the server's raw response."""

    def __init__(self, inner: Optional[BaseException], body: str) -> None:
        super().__init__(str(inner) if inner is not None else "error")
        self.inner = inner
        self.body = body
        self.__cause__ = inner