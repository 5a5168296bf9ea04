"""Per-client settings for WS-Management requests and their transport."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

DEFAULT_TIMEOUT = "PT60S"
DEFAULT_LOCALE = "en-US"
DEFAULT_ENVELOPE_SIZE = 153600


@dataclass(frozen=True)
class Parameters:
    """Settings placed in every request header and used to pick a transport.

    ``timeout`` is the WS-Management operation timeout as an ISO 8601
    duration, ``envelope_size`` the largest envelope the server may send.
    ``transport_decorator`` builds a transport in place of the default one,
    ``dial`` opens the connection the default transport uses.
    """

    timeout: str = DEFAULT_TIMEOUT
    locale: str = DEFAULT_LOCALE
    envelope_size: int = DEFAULT_ENVELOPE_SIZE
    transport_decorator: Optional[Callable[[], Any]] = None
    dial: Optional[Callable[..., Any]] = None


DEFAULT_PARAMETERS = Parameters()