"""Error taxonomy shared by the protocol decoder, connection and UI."""
from __future__ import annotations

__all__ = [
    "ProtocolError",
    "RedashConnectionError",
    "RedashError",
    "ServerReportedError",
    "TerminalTooSmallError",
]


class RedashError(RuntimeError):
    """Base class for failures surfaced by a single client operation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class RedashConnectionError(RedashError):
    """Raised when the client is not connected or the transport fails."""


class ProtocolError(RedashError):
    """Raised when the server reply does not follow the wire grammar."""

    def __init__(self, message: str, *, tag: int | None = None) -> None:
        if tag is not None:
            message = f"{message} - Server response: {chr(tag)}"
        super().__init__(message)
        self.tag = tag


class ServerReportedError(RedashError):
    """The server answered with its own error line."""


class TerminalTooSmallError(RedashError):
    """The terminal cannot fit the default layout."""
