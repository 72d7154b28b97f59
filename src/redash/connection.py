"""Synchronous single-socket connection to a Redis-protocol server."""
from __future__ import annotations

import logging
import socket
from typing import BinaryIO, Callable, Optional, Tuple

from .errors import RedashConnectionError, RedashError, ServerReportedError
from .protocol import DEFAULT_MAX_DEPTH, Data, RespDecoder, encode_command

__all__ = ["Connection", "DEFAULT_HOST", "DEFAULT_PORT", "SocketFactory"]

LOGGER = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 6379

SocketFactory = Callable[..., socket.socket]


class Connection:
    """Own one duplex byte stream and perform one round trip per :meth:`send`.

    The connection is not reentrant: a second :meth:`send` issued while one
    is still waiting for its reply is rejected instead of interleaving bytes
    on the stream.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        *,
        timeout: float | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        socket_factory: SocketFactory | None = None,
    ) -> None:
        self.host = host
        self.port = int(port)
        self.timeout = timeout
        self.max_depth = max_depth
        self._socket_factory = socket_factory or socket.create_connection
        self._socket: Optional[socket.socket] = None
        self._reader: Optional[BinaryIO] = None
        self._decoder: Optional[RespDecoder] = None
        self._in_flight = False

    @property
    def address(self) -> Tuple[str, int]:
        return self.host, self.port

    @property
    def endpoint(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def is_connected(self) -> bool:
        return self._socket is not None

    def connect(self) -> None:
        """Open the TCP stream; a no-op when already connected."""

        if self._socket is not None:
            return
        try:
            sock = self._socket_factory(self.address, self.timeout)
        except OSError as exc:
            LOGGER.error("Unable to connect to %s: %s", self.endpoint, exc)
            raise RedashConnectionError(
                f"unable to connect to {self.endpoint}: {exc}"
            ) from exc
        # the connect timeout must not carry over to replies such as BLPOP
        sock.settimeout(None)
        self._socket = sock
        self._reader = sock.makefile("rb")
        self._decoder = RespDecoder(self._reader, max_depth=self.max_depth)
        LOGGER.info("Connected to %s", self.endpoint)

    def send(self, command: str) -> Data:
        """Write ``command`` and block until exactly one reply is decoded."""

        if self._socket is None or self._decoder is None:
            raise RedashConnectionError("no_connection")
        if self._in_flight:
            raise RedashConnectionError("command_in_flight")
        self._in_flight = True
        try:
            LOGGER.debug("Sending %r to %s", command, self.endpoint)
            try:
                self._socket.sendall(encode_command(command))
            except OSError as exc:
                raise RedashConnectionError(
                    str(exc) or exc.__class__.__name__
                ) from exc
            reply = self._decoder.decode()
        except ServerReportedError as exc:
            LOGGER.debug("Command %r failed: %s", command, exc)
            raise
        except RedashError as exc:
            # unread bytes of a broken reply would be taken as the next reply
            LOGGER.warning(
                "Dropping connection to %s after %r: %s", self.endpoint, command, exc
            )
            self.close()
            raise
        finally:
            self._in_flight = False
        LOGGER.debug("Received %r", reply)
        return reply

    def close(self) -> None:
        """Release the reader and socket; safe to call more than once."""

        reader, sock = self._reader, self._socket
        self._reader = None
        self._socket = None
        self._decoder = None
        if reader is not None:
            try:
                reader.close()
            except OSError:
                LOGGER.debug("Ignoring error while closing reader", exc_info=True)
        if sock is not None:
            try:
                sock.close()
            finally:
                LOGGER.info("Closed connection to %s", self.endpoint)

    def __enter__(self) -> "Connection":
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
