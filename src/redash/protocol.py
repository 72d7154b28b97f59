"""Typed values and the blocking decoder for the Redis serialization protocol."""
from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, List, Tuple, Union

from .errors import ProtocolError, RedashConnectionError, ServerReportedError

__all__ = [
    "Array",
    "CommandEntry",
    "DEFAULT_MAX_DEPTH",
    "Data",
    "Integer",
    "NULL",
    "Null",
    "RespDecoder",
    "String",
    "data_lines",
    "encode_command",
    "render_data",
]


DEFAULT_MAX_DEPTH = 512

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_CR = 0x0D
_LF = 0x0A


@dataclass(frozen=True)
class Null:
    """Absent value, encoded as a Bulk String or Array of length ``-1``."""

    def __str__(self) -> str:
        return "null"


@dataclass(frozen=True)
class Integer:
    """Signed 64-bit integer reply."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class String:
    """UTF-8 text from a Simple String or Bulk String reply."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Array:
    """Ordered sequence of nested values."""

    items: Tuple["Data", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        return render_data(self)


Data = Union[Null, Integer, String, Array]

NULL = Null()


@dataclass(frozen=True)
class CommandEntry:
    """One successfully executed command and the reply it produced."""

    command: str
    response: Data


def render_data(data: Data) -> str:
    """Return the display text for ``data``; arrays put each child on its own line."""

    if isinstance(data, Array):
        return "\n".join(render_data(item) for item in data.items)
    return str(data)


def data_lines(data: Data) -> List[str]:
    """Expand ``data`` into result-pane rows, one row per scalar leaf."""

    if isinstance(data, Array):
        lines: List[str] = []
        for item in data.items:
            lines.extend(data_lines(item))
        return lines
    return [str(data)]


def encode_command(text: str) -> bytes:
    """Frame ``text`` as an inline command terminated by CRLF."""

    return f"{text}\r\n".encode("utf-8")


class RespDecoder:
    """Decode one :data:`Data` value at a time from a blocking byte stream.

    ``source`` only needs a ``read(size)`` method returning ``bytes``; a
    buffered socket reader (``socket.makefile("rb")``) or ``io.BytesIO``
    both qualify. A decode either returns a complete value or raises one of
    :class:`ProtocolError`, :class:`ServerReportedError` or
    :class:`RedashConnectionError`; partially built values never escape.
    """

    def __init__(self, source: BinaryIO, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth <= 0:
            raise ValueError("max_depth must be positive")
        self.source = source
        self.max_depth = int(max_depth)
        self._handlers = {
            ord("+"): self._simple_string,
            ord(":"): self._integer,
            ord("-"): self._error,
            ord("$"): self._bulk_string,
            ord("*"): self._array,
        }

    def decode(self) -> Data:
        """Read and return the next complete value from the stream."""

        return self._next(depth=0)

    # Grammar ---------------------------------------------------------------

    def _next(self, depth: int) -> Data:
        if depth >= self.max_depth:
            raise ProtocolError("nesting_too_deep")
        tag = self._read_exact(1)[0]
        handler = self._handlers.get(tag)
        if handler is None:
            raise ProtocolError("invalid_server_data_type", tag=tag)
        return handler(depth)

    def _simple_string(self, depth: int) -> Data:
        return String(self._decode_text(self._read_line()))

    def _integer(self, depth: int) -> Data:
        return Integer(self._read_integer())

    def _error(self, depth: int) -> Data:
        raise ServerReportedError(self._decode_text(self._read_line()))

    def _bulk_string(self, depth: int) -> Data:
        length = self._read_length()
        if length == -1:
            return NULL
        payload = self._read_exact(length)
        # the two bytes after the payload are the CRLF terminator, whatever they hold
        self._read_exact(2)
        return String(self._decode_text(payload))

    def _array(self, depth: int) -> Data:
        count = self._read_length()
        if count == -1:
            return NULL
        items: List[Data] = []
        first_error: ServerReportedError | None = None
        for _ in range(count):
            try:
                items.append(self._next(depth + 1))
            except ServerReportedError as exc:
                # the remaining elements are still read so the stream stays aligned
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error
        return Array(tuple(items))

    # Primitive readers -----------------------------------------------------

    def _read_exact(self, size: int) -> bytes:
        chunks = bytearray()
        while len(chunks) < size:
            try:
                chunk = self.source.read(size - len(chunks))
            except OSError as exc:
                raise RedashConnectionError(str(exc) or exc.__class__.__name__) from exc
            if not chunk:
                raise RedashConnectionError("connection_closed")
            chunks.extend(chunk)
        return bytes(chunks)

    def _read_line(self) -> bytes:
        line = bytearray()
        while True:
            byte = self._read_exact(1)[0]
            if byte == _CR:
                if self._read_exact(1)[0] != _LF:
                    raise ProtocolError("malformed line terminator")
                return bytes(line)
            line.append(byte)

    def _read_integer(self) -> int:
        raw = self._read_line()
        try:
            value = int(raw.decode("ascii").strip(), 10)
        except (UnicodeDecodeError, ValueError) as exc:
            raise ProtocolError(f"malformed integer: {raw!r}") from exc
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise ProtocolError(f"malformed integer: {raw!r}")
        return value

    def _read_length(self) -> int:
        length = self._read_integer()
        if length < -1:
            raise ProtocolError(f"invalid length: {length}")
        return length

    @staticmethod
    def _decode_text(payload: bytes) -> str:
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ProtocolError(f"invalid utf-8: {exc.reason}") from exc
