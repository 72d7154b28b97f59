from __future__ import annotations

import curses

import pytest

from redash.tui.events import Key
from redash.tui.renderer import CursesSurface, TextStyle, translate_key, truncate_text


class FakeWindow:
    """Minimal curses window double recording ``addstr`` calls."""

    def __init__(self, rows: int = 10, columns: int = 40, keys: tuple = ()) -> None:
        self.rows = rows
        self.columns = columns
        self.writes: list[tuple[int, int, str, int]] = []
        self.cursor: tuple[int, int] | None = None
        self.keys = list(keys)
        self.keypad_enabled = False
        self.refreshed = 0

    def keypad(self, flag: bool) -> None:
        self.keypad_enabled = flag

    def getmaxyx(self) -> tuple[int, int]:
        return self.rows, self.columns

    def addstr(self, row: int, column: int, text: str, attrs: int = 0) -> None:
        if row >= self.rows or column >= self.columns:
            raise curses.error("addwstr() returned ERR")
        self.writes.append((row, column, text, attrs))

    def move(self, row: int, column: int) -> None:
        if row >= self.rows:
            raise curses.error("wmove() returned ERR")
        self.cursor = (row, column)

    def get_wch(self):
        if not self.keys:
            raise curses.error("no input")
        return self.keys.pop(0)

    def refresh(self) -> None:
        self.refreshed += 1


@pytest.mark.parametrize(
    ("text", "width", "expected"),
    [
        ("PONG", 10, "PONG"),
        ("PONG", 4, "PONG"),
        ("LRANGE", 4, "LRA…"),
        ("LRANGE", 1, "…"),
        ("LRANGE", 0, ""),
        ("LRANGE", -3, ""),
    ],
)
def test_truncate_text(text: str, width: int, expected: str) -> None:
    result = truncate_text(text, width)

    assert result == expected
    assert len(result) <= max(0, width)


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("a", "a"),
        ("é", "é"),
        (ord("z"), "z"),
        ("\n", Key.ENTER),
        (10, Key.ENTER),
        (curses.KEY_ENTER, Key.ENTER),
        (13, "\r"),
        ("\r", "\r"),
        ("\x1b", Key.ESCAPE),
        ("\t", Key.TAB),
        (curses.KEY_UP, Key.UP),
        (curses.KEY_DOWN, Key.DOWN),
        (curses.KEY_BACKSPACE, Key.BACKSPACE),
        ("\x7f", Key.BACKSPACE),
        (curses.KEY_DC, Key.DELETE),
        (curses.KEY_F1, None),
        ("\x01", None),
    ],
)
def test_translate_key(code, expected) -> None:
    assert translate_key(code) == expected


def test_curses_surface_draws_box_and_truncated_text() -> None:
    window = FakeWindow()
    surface = CursesSurface(window)

    surface.draw_box(0, 0, 5, 3)
    surface.draw_text("History", 0, 2, 3, TextStyle.BOLD)

    assert window.keypad_enabled
    assert (0, 0, "┌───┐", 0) in window.writes
    assert (2, 0, "└───┘", 0) in window.writes
    assert (0, 2, "Hi…", curses.A_BOLD) in window.writes


def test_curses_surface_scrollbar_places_thumb_by_proportion() -> None:
    window = FakeWindow()
    surface = CursesSurface(window)

    surface.draw_vscrollbar(1, 9, 6, 1.0)

    assert (1, 9, "↟", 0) in window.writes
    assert (6, 9, "↡", 0) in window.writes
    assert (5, 9, "█", 0) in window.writes


def test_curses_surface_ignores_out_of_bounds_drawing() -> None:
    window = FakeWindow(rows=3, columns=10)
    surface = CursesSurface(window)

    surface.draw_text("overflow", 5, 0, 8)
    surface.move_cursor(7, 1)

    assert window.writes == []
    assert window.cursor is None


def test_curses_surface_reads_and_translates_keys() -> None:
    window = FakeWindow(keys=("i", curses.KEY_DC))
    surface = CursesSurface(window)

    assert surface.size() == (10, 40)
    assert surface.read_key() == "i"
    assert surface.read_key() is Key.DELETE
    assert surface.read_key() is None
