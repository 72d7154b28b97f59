"""Interactive terminal client for Redis-protocol servers."""
from __future__ import annotations

from .client_config import ClientConfig, ClientConfigError, load_client_config
from .connection import DEFAULT_HOST, DEFAULT_PORT, Connection
from .errors import (
    ProtocolError,
    RedashConnectionError,
    RedashError,
    ServerReportedError,
    TerminalTooSmallError,
)
from .protocol import (
    NULL,
    Array,
    CommandEntry,
    Data,
    Integer,
    Null,
    RespDecoder,
    String,
    data_lines,
    encode_command,
    render_data,
)

__version__ = "0.1.0"

__all__ = [
    "Array",
    "ClientConfig",
    "ClientConfigError",
    "CommandEntry",
    "Connection",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "Data",
    "Integer",
    "NULL",
    "Null",
    "ProtocolError",
    "RedashConnectionError",
    "RedashError",
    "RespDecoder",
    "ServerReportedError",
    "String",
    "TerminalTooSmallError",
    "data_lines",
    "encode_command",
    "load_client_config",
    "render_data",
]
