"""Capability set shared by every mounted widget."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .events import Event, EventHandler, EventListeners, EventType
from .renderer import RenderSurface

__all__ = ["Component", "Position"]


@dataclass(frozen=True)
class Position:
    """Top-left anchor assigned when a component is mounted."""

    top: int
    left: int


class Component(ABC):
    """Base class for widgets driven by the application orchestrator.

    ``render`` must not mutate widget state. ``trigger`` returns whether the
    event was consumed, which is advisory: the orchestrator broadcasts every
    key event to every mounted component and each widget filters on its own
    focused flag.
    """

    def __init__(self) -> None:
        self.focused = False
        self._listeners = EventListeners()

    @abstractmethod
    def render(self, surface: RenderSurface, position: Position) -> None:
        """Draw the widget at ``position``."""

    def render_focus(self, surface: RenderSurface, position: Position) -> None:
        """Place the terminal cursor when focused; a no-op otherwise."""

        pass

    def toggle_focus(self) -> None:
        self.focused = not self.focused

    @abstractmethod
    def trigger(self, event: Event) -> bool:
        """Apply ``event`` and report whether it was consumed."""

    def add_event_listener(self, event_type: EventType, handler: EventHandler) -> None:
        self._listeners.add(event_type, handler)

    def is_focusable(self) -> bool:
        return True

    def _fire(self, event: Event) -> None:
        self._listeners.dispatch(event)
