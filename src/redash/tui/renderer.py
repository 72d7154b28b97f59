"""Character-grid drawing surface consumed by every visual component."""
from __future__ import annotations

import curses
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Optional, Tuple, Union

from .events import Key

__all__ = [
    "CursesSurface",
    "KeyInput",
    "RenderSurface",
    "TextStyle",
    "translate_key",
    "truncate_text",
]


KeyInput = Union[str, Key]

ELLIPSIS = "…"


class TextStyle(Enum):
    NORMAL = auto()
    BOLD = auto()
    ITALIC = auto()


def truncate_text(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` cells, marking the cut with an ellipsis."""

    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    return text[: width - 1] + ELLIPSIS


class RenderSurface(ABC):
    """Strategy object that hides the terminal drawing primitives."""

    @abstractmethod
    def size(self) -> Tuple[int, int]:
        """Return ``(rows, columns)`` of the drawable area."""

    @abstractmethod
    def draw_box(self, top: int, left: int, width: int, height: int) -> None:
        """Draw a rectangular frame whose outer edge spans ``width`` x ``height``."""

    @abstractmethod
    def draw_text(
        self,
        text: str,
        top: int,
        left: int,
        width: int,
        style: TextStyle = TextStyle.NORMAL,
        focused: bool = False,
    ) -> None:
        """Draw a single-line text run truncated to ``width`` cells."""

    @abstractmethod
    def clear_rect(self, top: int, left: int, width: int, height: int) -> None:
        """Blank a rectangular region."""

    @abstractmethod
    def draw_vscrollbar(
        self, top: int, left: int, height: int, proportion: float
    ) -> None:
        """Draw a vertical scrollbar whose thumb sits at ``proportion`` (0..1)."""

    @abstractmethod
    def move_cursor(self, row: int, column: int) -> None:
        """Place the terminal cursor."""

    @abstractmethod
    def read_key(self) -> Optional[KeyInput]:
        """Block for the next key; ``None`` for keys the UI does not understand."""

    def refresh(self) -> None:
        """Flush pending drawing to the terminal."""

        pass


_CURSES_KEYS = {
    curses.KEY_BACKSPACE: Key.BACKSPACE,
    127: Key.BACKSPACE,
    8: Key.BACKSPACE,
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_ENTER: Key.ENTER,
    10: Key.ENTER,
    27: Key.ESCAPE,
    9: Key.TAB,
    curses.KEY_DC: Key.DELETE,
}


def translate_key(code: Union[int, str]) -> Optional[KeyInput]:
    """Map a curses ``getch``/``get_wch`` result onto a :data:`KeyInput`."""

    if isinstance(code, str):
        if len(code) != 1:
            return None
        code_point = ord(code)
        if code_point in _CURSES_KEYS:
            return _CURSES_KEYS[code_point]
        if code == "\r" or code.isprintable():
            return code
        return None
    if code in _CURSES_KEYS:
        return _CURSES_KEYS[code]
    if code == 13:
        return "\r"
    # codes from KEY_MIN upwards are function keys, not characters
    if 0 <= code < curses.KEY_MIN and chr(code).isprintable():
        return chr(code)
    return None


class CursesSurface(RenderSurface):
    """Draw onto a curses window; drawing past the edge is silently clipped."""

    FOCUS_COLOR_PAIR = 1
    SCROLL_UP = "↟"
    SCROLL_DOWN = "↡"
    SCROLL_THUMB = "█"

    def __init__(self, window: "curses._CursesWindow") -> None:
        self.window = window
        self._focus_attr = curses.A_REVERSE
        try:
            if curses.has_colors():
                curses.start_color()
                curses.use_default_colors()
                curses.init_pair(self.FOCUS_COLOR_PAIR, curses.COLOR_BLACK, curses.COLOR_CYAN)
                self._focus_attr = curses.color_pair(self.FOCUS_COLOR_PAIR)
        except curses.error:
            self._focus_attr = curses.A_REVERSE
        window.keypad(True)

    def size(self) -> Tuple[int, int]:
        rows, columns = self.window.getmaxyx()
        return rows, columns

    def draw_box(self, top: int, left: int, width: int, height: int) -> None:
        if width < 2 or height < 2:
            return
        inner = width - 2
        self._addstr(top, left, "┌" + "─" * inner + "┐")
        for row in range(top + 1, top + height - 1):
            self._addstr(row, left, "│")
            self._addstr(row, left + width - 1, "│")
        self._addstr(top + height - 1, left, "└" + "─" * inner + "┘")

    def draw_text(
        self,
        text: str,
        top: int,
        left: int,
        width: int,
        style: TextStyle = TextStyle.NORMAL,
        focused: bool = False,
    ) -> None:
        attrs = self._style_attr(style)
        if focused:
            attrs |= self._focus_attr
        self._addstr(top, left, truncate_text(text, width), attrs)

    def clear_rect(self, top: int, left: int, width: int, height: int) -> None:
        if width <= 0:
            return
        blank = " " * width
        for row in range(top, top + height):
            self._addstr(row, left, blank)

    def draw_vscrollbar(
        self, top: int, left: int, height: int, proportion: float
    ) -> None:
        if height < 3:
            return
        proportion = min(1.0, max(0.0, proportion))
        track = height - 2
        thumb = int(proportion * (track - 1))
        self._addstr(top, left, self.SCROLL_UP)
        for row in range(top + 1, top + height - 1):
            self._addstr(row, left, " ")
        self._addstr(top + 1 + thumb, left, self.SCROLL_THUMB)
        self._addstr(top + height - 1, left, self.SCROLL_DOWN)

    def move_cursor(self, row: int, column: int) -> None:
        try:
            self.window.move(row, column)
        except curses.error:
            pass

    def read_key(self) -> Optional[KeyInput]:
        try:
            code = self.window.get_wch()
        except curses.error:
            return None
        return translate_key(code)

    def refresh(self) -> None:
        self.window.refresh()

    @staticmethod
    def _style_attr(style: TextStyle) -> int:
        if style is TextStyle.BOLD:
            return curses.A_BOLD
        if style is TextStyle.ITALIC:
            return getattr(curses, "A_ITALIC", curses.A_NORMAL)
        return curses.A_NORMAL

    def _addstr(self, row: int, column: int, text: str, attrs: int = 0) -> None:
        if not text:
            return
        try:
            self.window.addstr(row, column, text, attrs)
        except curses.error:
            # writing the bottom-right cell raises after the glyph is drawn
            pass
