"""Passive single-row status label."""
from __future__ import annotations

from .component import Component, Position
from .events import Event
from .renderer import RenderSurface, TextStyle

__all__ = ["SystemBar"]


class SystemBar(Component):
    """Display-only label; never focusable and never consumes events."""

    def __init__(self, label: str, width: int) -> None:
        super().__init__()
        self.label = label
        self.width = int(width)

    def set_label(self, label: str) -> None:
        self.label = label

    def render(self, surface: RenderSurface, position: Position) -> None:
        surface.clear_rect(position.top, position.left, self.width, 1)
        surface.draw_text(
            self.label, position.top, position.left, self.width, TextStyle.ITALIC
        )

    def toggle_focus(self) -> None:
        pass

    def trigger(self, event: Event) -> bool:
        return False

    def is_focusable(self) -> bool:
        return False
