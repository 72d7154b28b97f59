"""Scrollable item list with viewport tracking and optional selection."""
from __future__ import annotations

from typing import Iterable, List

from .component import Component, Position
from .events import Event, EventType, Key, KeyData, Number
from .renderer import RenderSurface, TextStyle

__all__ = ["SelectableList"]


class SelectableList(Component):
    """Framed list whose visible window follows the selected index.

    Interactive lists move the selection one item per key and fire
    ``VALUE_CHANGED`` on each move. Passive lists (``interactive=False``)
    act as a read-only detail pane: they page through their items by
    ``visible_rows - 1`` per key, never highlight a row and never fire
    ``VALUE_CHANGED``.

    Invariants kept after every mutation:

    * ``0 <= value <= max(0, len(items) - 1)``
    * ``0 <= viewport_top <= max(0, len(items) - visible_rows)``
    * ``viewport_top <= value < viewport_top + visible_rows`` for non-empty lists
    """

    def __init__(
        self,
        label: str,
        width: int,
        height: int,
        items: Iterable[str] = (),
        *,
        interactive: bool = True,
    ) -> None:
        super().__init__()
        if width < 3 or height < 3:
            raise ValueError("list width and height must be at least 3")
        self.label = label
        self.width = int(width)
        self.height = int(height)
        self.interactive = interactive
        self.value = 0
        self.viewport_top = 0
        self._items: List[str] = list(items)

    @property
    def items(self) -> tuple[str, ...]:
        return tuple(self._items)

    @property
    def visible_rows(self) -> int:
        return self.height - 2

    @property
    def page_size(self) -> int:
        return max(1, self.visible_rows - 1)

    def __len__(self) -> int:
        return len(self._items)

    def is_overflowing(self) -> bool:
        return len(self._items) > self.visible_rows

    def visible_items(self) -> tuple[str, ...]:
        end = self.viewport_top + self.visible_rows
        return tuple(self._items[self.viewport_top:end])

    def scroll_proportion(self) -> float:
        """Return the scrollbar thumb position in ``[0, 1]``."""

        hidden = len(self._items) - self.visible_rows
        if hidden <= 0:
            return 0.0
        return self.viewport_top / hidden

    # Mutation --------------------------------------------------------------

    def append_item(self, item: str) -> None:
        self._items.append(str(item))

    def replace_items(self, items: Iterable[str]) -> None:
        self.clear()
        self._items.extend(str(item) for item in items)

    def clear(self) -> None:
        self._items.clear()
        self.value = 0
        self.viewport_top = 0

    def select(self, index: int) -> None:
        """Move the selection to ``index`` (clamped) and scroll it into view."""

        self._move_to(index, step=1)

    def next_item(self) -> None:
        step = 1 if self.interactive else self.page_size
        self._move_to(self.value + step, step=step)

    def prev_item(self) -> None:
        step = 1 if self.interactive else self.page_size
        self._move_to(self.value - step, step=step)

    def _move_to(self, index: int, *, step: int) -> None:
        last = max(0, len(self._items) - 1)
        self.value = min(max(0, index), last)
        self._scroll_into_view(step)
        if self.interactive and self._items:
            self._fire(Event(EventType.VALUE_CHANGED, Number(self.value)))

    def _scroll_into_view(self, step: int) -> None:
        rows = self.visible_rows
        top = self.viewport_top
        if self.value < top:
            top = min(top - step, self.value) if step > 1 else self.value
        elif self.value >= top + rows:
            if step > 1:
                top = max(top + step, self.value - rows + 1)
            else:
                top = self.value - rows + 1
        max_top = max(0, len(self._items) - rows)
        self.viewport_top = min(max(0, top), max_top)

    # Component API ---------------------------------------------------------

    def render(self, surface: RenderSurface, position: Position) -> None:
        top, left = position.top, position.left
        inner_width = self.width - 2
        surface.draw_box(top, left, self.width, self.height)
        surface.draw_text(
            self.label, top, left + 2, self.width - 4, TextStyle.BOLD, self.focused
        )
        surface.clear_rect(top + 1, left + 1, inner_width, self.visible_rows)
        if self.is_overflowing():
            surface.draw_vscrollbar(
                top + 1, left + self.width - 1, self.visible_rows, self.scroll_proportion()
            )
        for offset, item in enumerate(self.visible_items()):
            selected = self.interactive and self.viewport_top + offset == self.value
            surface.draw_text(
                item,
                top + 1 + offset,
                left + 1,
                inner_width,
                TextStyle.BOLD if selected else TextStyle.NORMAL,
                selected and self.focused,
            )

    def render_focus(self, surface: RenderSurface, position: Position) -> None:
        if not self.focused:
            return
        # passive lists have no highlight, so the cursor marks the paging position
        row = self.value - self.viewport_top
        surface.move_cursor(position.top + 1 + row, position.left + 1)

    def trigger(self, event: Event) -> bool:
        if not self.focused:
            return False
        if event.event_type is EventType.FOCUS:
            return True
        if event.event_type is not EventType.KEY_PRESS:
            return False
        data = event.event_data
        if not isinstance(data, KeyData):
            return False
        if data.key is Key.UP:
            self.prev_item()
            return True
        if data.key is Key.DOWN:
            self.next_item()
            return True
        return False
