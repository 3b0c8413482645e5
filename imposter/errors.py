"""Error kinds raised by the lobby core.

Routers translate these into HTTP status codes; the websocket handler turns
``ProtocolViolation`` into a single ``{"error": ...}`` message.
"""
from __future__ import annotations


class LobbyError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(LobbyError):
    """Unknown lobby code."""

    status_code = 404


class InvalidArgument(LobbyError, ValueError):
    """Malformed request or out-of-range imposter count."""

    status_code = 400


class ProtocolViolation(LobbyError):
    """First message on a new connection was not a valid join."""

    status_code = 400


__all__ = ["LobbyError", "NotFound", "InvalidArgument", "ProtocolViolation"]
