"""Closed event vocabulary and per-type handler registration."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, List, Union

__all__ = [
    "Char",
    "Event",
    "EventData",
    "EventHandler",
    "EventListeners",
    "EventType",
    "Flag",
    "Key",
    "KeyData",
    "Number",
    "Text",
]


class EventType(Enum):
    """Kinds of events a component can receive or raise."""

    FOCUS = auto()
    KEY_PRESS = auto()
    SUBMIT = auto()
    VALUE_CHANGED = auto()
    INPUT_MODE_CHANGED = auto()


class Key(Enum):
    """Non-printable keys understood by the components."""

    BACKSPACE = auto()
    UP = auto()
    DOWN = auto()
    ENTER = auto()
    ESCAPE = auto()
    TAB = auto()
    DELETE = auto()


@dataclass(frozen=True)
class Char:
    char: str


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Number:
    value: int


@dataclass(frozen=True)
class Flag:
    value: bool


@dataclass(frozen=True)
class KeyData:
    key: Key


EventData = Union[Char, Text, Number, Flag, KeyData]


@dataclass(frozen=True)
class Event:
    """One dispatch cycle's stimulus; never retained past its handlers."""

    event_type: EventType
    event_data: EventData

    @classmethod
    def key_press(cls, key: Union[str, Key]) -> "Event":
        """Build a ``KEY_PRESS`` event from a printable character or :class:`Key`."""

        if isinstance(key, Key):
            return cls(EventType.KEY_PRESS, KeyData(key))
        return cls(EventType.KEY_PRESS, Char(key))


EventHandler = Callable[[Event], None]


class EventListeners:
    """Append-only table of handlers keyed by :class:`EventType`.

    Handlers run synchronously in registration order; there is no removal.
    """

    def __init__(self) -> None:
        self._handlers: Dict[EventType, List[EventHandler]] = {}

    def add(self, event_type: EventType, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def handlers_for(self, event_type: EventType) -> tuple[EventHandler, ...]:
        return tuple(self._handlers.get(event_type, ()))

    def dispatch(self, event: Event) -> int:
        """Invoke every handler registered for ``event`` and return how many ran."""

        handlers = self.handlers_for(event.event_type)
        for handler in handlers:
            handler(event)
        return len(handlers)
