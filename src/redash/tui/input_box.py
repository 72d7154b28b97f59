"""Modal single-line text entry."""
from __future__ import annotations

from enum import Enum, auto

from .component import Component, Position
from .events import Char, Event, EventType, Flag, Key, KeyData, Text
from .renderer import RenderSurface, TextStyle

__all__ = ["InputBox", "InputMode"]


class InputMode(Enum):
    """Editing modes; keys only edit the buffer while in ``INSERT``."""

    NORMAL = auto()
    INSERT = auto()


class InputBox(Component):
    """Framed, three-row text field with vi-style normal and insert modes.

    ``i`` or ``a`` enters insert mode and Escape leaves it; both fire
    ``INPUT_MODE_CHANGED``. Enter in insert mode fires ``SUBMIT`` with the
    buffer text and then clears the buffer.
    """

    HEIGHT = 3
    INSERT_KEYS = frozenset({"i", "a"})
    INSERT_SUFFIX = " (insert)"

    def __init__(self, label: str, width: int) -> None:
        super().__init__()
        if width < 4:
            raise ValueError("input box width must be at least 4")
        self.label = label
        self.width = int(width)
        self.mode = InputMode.NORMAL
        self._value = ""

    @property
    def value(self) -> str:
        return self._value

    @property
    def inner_width(self) -> int:
        return self.width - 2

    def clear(self) -> None:
        self._value = ""

    def visible_text(self) -> str:
        """Return the tail of the buffer that fits beside the cursor cell."""

        capacity = self.inner_width - 1
        if len(self._value) > capacity:
            return self._value[len(self._value) - capacity:]
        return self._value

    # Component API ---------------------------------------------------------

    def render(self, surface: RenderSurface, position: Position) -> None:
        top, left = position.top, position.left
        surface.draw_box(top, left, self.width, self.HEIGHT)
        label = self.label
        if self.mode is InputMode.INSERT:
            label += self.INSERT_SUFFIX
        surface.draw_text(
            label, top, left + 2, self.width - 4, TextStyle.BOLD, self.focused
        )
        surface.clear_rect(top + 1, left + 1, self.inner_width, 1)
        surface.draw_text(self.visible_text(), top + 1, left + 1, self.inner_width)

    def render_focus(self, surface: RenderSurface, position: Position) -> None:
        if not self.focused:
            return
        surface.move_cursor(
            position.top + 1, position.left + 1 + len(self.visible_text())
        )

    def trigger(self, event: Event) -> bool:
        if not self.focused:
            return False
        if event.event_type is EventType.FOCUS:
            return True
        if event.event_type is not EventType.KEY_PRESS:
            return False
        data = event.event_data
        if isinstance(data, KeyData):
            return self._handle_key(data.key)
        if isinstance(data, Char):
            return self._handle_char(data.char)
        return False

    # Transitions -----------------------------------------------------------

    def _handle_key(self, key: Key) -> bool:
        if key is Key.BACKSPACE:
            self._value = self._value[:-1]
            return True
        if key is Key.ENTER:
            return self._handle_enter()
        if key is Key.ESCAPE and self.mode is InputMode.INSERT:
            self._set_mode(InputMode.NORMAL)
            return True
        return False

    def _handle_char(self, char: str) -> bool:
        if char == "\n":
            return self._handle_enter()
        if char == "\r":
            return True
        if self.mode is InputMode.NORMAL:
            if char in self.INSERT_KEYS:
                self._set_mode(InputMode.INSERT)
                return True
            return False
        if char.isprintable():
            self._value += char
            return True
        return False

    def _handle_enter(self) -> bool:
        if self.mode is InputMode.INSERT:
            self._fire(Event(EventType.SUBMIT, Text(self._value)))
            self.clear()
        return True

    def _set_mode(self, mode: InputMode) -> None:
        self.mode = mode
        self._fire(
            Event(EventType.INPUT_MODE_CHANGED, Flag(mode is InputMode.INSERT))
        )
