"""Error taxonomy shared across the connection core and the app layer."""

from __future__ import annotations

import traceback
from typing import Optional

TRACE_LIMIT = 5


class SocketBoltError(Exception):
    """Base error for socketbolt."""


class ConfigurationError(SocketBoltError):
    """Raised when required settings are missing or invalid."""


class EndpointResolutionError(SocketBoltError):
    """Raised when a Socket Mode connection URL cannot be obtained."""

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code


class EndpointAuthError(EndpointResolutionError):
    """Raised when the platform rejects the app-level token."""


class EndpointNetworkError(EndpointResolutionError):
    """Raised when the REST endpoint cannot be reached."""


class EndpointProtocolError(EndpointResolutionError):
    """Raised when the REST endpoint answers with an unexpected body."""


class TransportConnectError(SocketBoltError):
    """Raised when the duplex connection cannot be established."""


class TransportNotReady(SocketBoltError):
    """Raised when a frame is sent without an open connection."""


class WebApiError(SocketBoltError):
    """Raised when a Web API method answers with ``ok: false``."""

    def __init__(self, method: str, code: Optional[str]) -> None:
        super().__init__(f"{method} failed: {code}")
        self.method = method
        self.code = code


def short_trace(exc: BaseException, limit: int = TRACE_LIMIT) -> str:
    """Return the innermost ``limit`` traceback frames of ``exc`` as text."""

    frames = traceback.format_tb(exc.__traceback__)
    return "".join(frames[-limit:]).rstrip()
