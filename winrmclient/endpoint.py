"""Where and how to reach a WinRM service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_TIMEOUT = 60.0


@dataclass
class Endpoint:
    """A WinRM server address with its TLS material.

    ``timeout`` is in seconds and bounds the wait for response headers;
    a zero value falls back to 60 seconds. ``ca_cert``, ``cert`` and ``key``
    hold PEM data.
    """

    host: str
    port: int
    https: bool = False
    insecure: bool = False
    ca_cert: Optional[bytes] = None
    cert: Optional[bytes] = None
    key: Optional[bytes] = None
    timeout: float = DEFAULT_TIMEOUT
    tls_server_name: str = ""

    def __post_init__(self) -> None:
        if not self.timeout:
            self.timeout = DEFAULT_TIMEOUT

    def url(self) -> str:
        """Return the WS-Management URL of this endpoint."""
        scheme = "https" if self.https else "http"
        return f"{scheme}://{self.host}:{self.port}/wsman"