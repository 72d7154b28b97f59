from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import pytest

from redash.tui.events import Key
from redash.tui.renderer import KeyInput, RenderSurface, TextStyle, truncate_text


@dataclass(frozen=True)
class DrawnText:
    text: str
    top: int
    left: int
    style: TextStyle
    focused: bool


class RecordingSurface(RenderSurface):
    """In-memory surface that records drawing calls and replays scripted keys.

    Once the scripted keys run out :meth:`read_key` returns the delete key so
    an ``App.run`` loop always terminates.
    """

    def __init__(
        self, rows: int = 24, columns: int = 80, keys: Iterable[KeyInput] = ()
    ) -> None:
        self.rows = rows
        self.columns = columns
        self.keys = deque(keys)
        self.texts: List[DrawnText] = []
        self.boxes: List[Tuple[int, int, int, int]] = []
        self.clears: List[Tuple[int, int, int, int]] = []
        self.scrollbars: List[Tuple[int, int, int, float]] = []
        self.cursor: Optional[Tuple[int, int]] = None
        self.refreshes = 0

    def reset(self) -> None:
        self.texts.clear()
        self.boxes.clear()
        self.clears.clear()
        self.scrollbars.clear()
        self.cursor = None

    def size(self) -> Tuple[int, int]:
        return self.rows, self.columns

    def draw_box(self, top: int, left: int, width: int, height: int) -> None:
        self.boxes.append((top, left, width, height))

    def draw_text(
        self,
        text: str,
        top: int,
        left: int,
        width: int,
        style: TextStyle = TextStyle.NORMAL,
        focused: bool = False,
    ) -> None:
        self.texts.append(DrawnText(truncate_text(text, width), top, left, style, focused))

    def clear_rect(self, top: int, left: int, width: int, height: int) -> None:
        self.clears.append((top, left, width, height))

    def draw_vscrollbar(
        self, top: int, left: int, height: int, proportion: float
    ) -> None:
        self.scrollbars.append((top, left, height, proportion))

    def move_cursor(self, row: int, column: int) -> None:
        self.cursor = (row, column)

    def read_key(self) -> Optional[KeyInput]:
        if not self.keys:
            return Key.DELETE
        return self.keys.popleft()

    def refresh(self) -> None:
        self.refreshes += 1

    def text_at(self, top: int, left: int) -> List[str]:
        return [drawn.text for drawn in self.texts if drawn.top == top and drawn.left == left]


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def make_surface():
    return RecordingSurface
