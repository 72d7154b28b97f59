"""Application orchestrator wiring widgets, keyboard input and the connection."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from functools import partial
from typing import Callable, Deque, Dict, List, Optional, Tuple, TypeVar

from ..connection import Connection
from ..errors import RedashError, TerminalTooSmallError
from ..protocol import CommandEntry, Data, data_lines
from .component import Component, Position
from .events import Event, EventType, Flag, Key, Number, Text
from .input_box import InputBox
from .renderer import KeyInput, RenderSurface
from .selectable_list import SelectableList
from .system_bar import SystemBar

__all__ = ["App", "Mount", "QUIT_KEY"]

LOGGER = logging.getLogger(__name__)

QUIT_KEY = Key.DELETE

_DOMAIN_EVENTS = (
    EventType.SUBMIT,
    EventType.VALUE_CHANGED,
    EventType.INPUT_MODE_CHANGED,
)

_C = TypeVar("_C", bound=Component)


@dataclass(frozen=True)
class Mount:
    """A mounted component and the fixed position it renders at."""

    component: Component
    position: Position


class App:
    """Own the mounted components, the focus cursor and the command history.

    Components are kept in an arena and addressed by the integer handle
    returned from :meth:`mount`. Domain events raised by a widget are queued
    together with its handle and handled centrally once the widget's
    ``trigger`` call has returned, so no handler ever mutates a widget that
    is still on the call stack.
    """

    MIN_ROWS = 8
    MIN_COLUMNS = 24

    def __init__(
        self,
        surface: RenderSurface,
        connection: Connection,
        *,
        session_name: str | None = None,
        sidebar_ratio: float = 0.2,
    ) -> None:
        self.surface = surface
        self.connection = connection
        self.session_name = session_name
        self.sidebar_ratio = float(sidebar_ratio)
        self.current_focus: Optional[int] = None
        self._mounts: List[Mount] = []
        self._history: List[CommandEntry] = []
        self._pending: Deque[Tuple[int, Event]] = deque()
        self._draining = False
        self.input_handle: Optional[int] = None
        self.history_handle: Optional[int] = None
        self.result_handle: Optional[int] = None
        self.status_handle: Optional[int] = None
        self._handlers: Dict[EventType, Callable[[int, Event], None]] = {
            EventType.SUBMIT: self._on_submit,
            EventType.VALUE_CHANGED: self._on_value_changed,
            EventType.INPUT_MODE_CHANGED: self._on_input_mode_changed,
        }

    # Arena -----------------------------------------------------------------

    @property
    def history(self) -> Tuple[CommandEntry, ...]:
        return tuple(self._history)

    @property
    def mounts(self) -> Tuple[Mount, ...]:
        return tuple(self._mounts)

    def component(self, handle: int) -> Component:
        return self._mounts[handle].component

    def mount(self, component: Component, position: Position) -> int:
        """Add ``component`` at ``position`` and return its handle.

        The first focusable component mounted receives focus.
        """

        handle = len(self._mounts)
        self._mounts.append(Mount(component, position))
        for event_type in _DOMAIN_EVENTS:
            component.add_event_listener(event_type, partial(self._post, handle))
        if self.current_focus is None and component.is_focusable():
            component.toggle_focus()
            self.current_focus = handle
        return handle

    def mount_default_layout(self) -> None:
        """Mount the command box, history list, result pane and status bar."""

        rows, columns = self.surface.size()
        if rows < self.MIN_ROWS or columns < self.MIN_COLUMNS:
            raise TerminalTooSmallError(
                f"terminal too small: need {self.MIN_COLUMNS}x{self.MIN_ROWS}, "
                f"got {columns}x{rows}"
            )
        sidebar = max(InputBox.HEIGHT + 1, int(columns * self.sidebar_ratio))
        body_rows = rows - 1

        self.input_handle = self.mount(InputBox("Command", sidebar), Position(0, 0))
        self.history_handle = self.mount(
            SelectableList(
                "History", sidebar, body_rows - InputBox.HEIGHT, interactive=True
            ),
            Position(InputBox.HEIGHT, 0),
        )
        self.result_handle = self.mount(
            SelectableList("Result", columns - sidebar, body_rows, interactive=False),
            Position(0, sidebar),
        )
        self.status_handle = self.mount(
            SystemBar(self._status_text(insert=False), columns - 1),
            Position(body_rows, 0),
        )

    @property
    def input_box(self) -> InputBox:
        return self._role(self.input_handle, InputBox)

    @property
    def history_list(self) -> SelectableList:
        return self._role(self.history_handle, SelectableList)

    @property
    def result_list(self) -> SelectableList:
        return self._role(self.result_handle, SelectableList)

    @property
    def status_bar(self) -> SystemBar:
        return self._role(self.status_handle, SystemBar)

    def _role(self, handle: Optional[int], expected: type[_C]) -> _C:
        if handle is None:
            raise RuntimeError("default layout is not mounted")
        component = self.component(handle)
        if not isinstance(component, expected):
            raise TypeError(f"handle {handle} is not a {expected.__name__}")
        return component

    # Rendering -------------------------------------------------------------

    def render(self) -> None:
        """Draw every component, then let the focused one place the cursor."""

        for mount in self._mounts:
            mount.component.render(self.surface, mount.position)
        for mount in self._mounts:
            mount.component.render_focus(self.surface, mount.position)
        self.surface.refresh()

    # Input -----------------------------------------------------------------

    def handle_input(self, key: Optional[KeyInput]) -> bool:
        """Apply one keyboard input; return ``False`` when the loop should stop."""

        if key is None:
            return True
        if key is QUIT_KEY:
            return False
        if key is Key.TAB:
            self.focus_next()
            return True
        self.broadcast(Event.key_press(key))
        return True

    def broadcast(self, event: Event) -> List[bool]:
        """Offer ``event`` to every mounted component in mount order."""

        consumed = [mount.component.trigger(event) for mount in self._mounts]
        self._drain()
        return consumed

    def focus_next(self) -> None:
        """Move focus to the next focusable component, wrapping around."""

        if self.current_focus is None:
            return
        total = len(self._mounts)
        candidate = self.current_focus
        for _ in range(total):
            candidate = (candidate + 1) % total
            if self._mounts[candidate].component.is_focusable():
                break
        if candidate == self.current_focus:
            return
        self.component(self.current_focus).toggle_focus()
        self.current_focus = candidate
        focused = self.component(candidate)
        focused.toggle_focus()
        focused.trigger(Event(EventType.FOCUS, Number(candidate)))
        self._drain()

    def run(self) -> None:
        """Render, block for a key, dispatch; repeat until the quit key."""

        LOGGER.info("Interactive session started against %s", self.connection.endpoint)
        while True:
            self.render()
            if not self.handle_input(self.surface.read_key()):
                break
        LOGGER.info("Interactive session finished after %d commands", len(self._history))

    # Commands --------------------------------------------------------------

    def execute(self, command: str) -> Optional[CommandEntry]:
        """Send ``command`` and show its reply, or its error, in the result pane."""

        try:
            response = self.connection.send(command)
        except RedashError as exc:
            LOGGER.warning("Command %r failed: %s", command, exc)
            self.result_list.replace_items(str(exc).splitlines() or [""])
            return None
        entry = CommandEntry(command=command, response=response)
        self._history.append(entry)
        self.show_response(response)
        history_list = self.history_list
        history_list.append_item(command)
        history_list.select(len(history_list) - 1)
        self._drain()
        return entry

    def show_response(self, response: Data) -> None:
        self.result_list.replace_items(data_lines(response))

    # Domain event queue ----------------------------------------------------

    def _post(self, handle: int, event: Event) -> None:
        self._pending.append((handle, event))

    def _drain(self) -> None:
        if self._draining:
            return
        self._draining = True
        try:
            while self._pending:
                handle, event = self._pending.popleft()
                handler = self._handlers.get(event.event_type)
                if handler is not None:
                    handler(handle, event)
        finally:
            self._draining = False

    def _on_submit(self, handle: int, event: Event) -> None:
        data = event.event_data
        if handle != self.input_handle or not isinstance(data, Text):
            return
        if not data.text.strip():
            LOGGER.debug("Ignoring blank command")
            return
        self.execute(data.text)

    def _on_value_changed(self, handle: int, event: Event) -> None:
        data = event.event_data
        if handle != self.history_handle or not isinstance(data, Number):
            return
        if 0 <= data.value < len(self._history):
            self.show_response(self._history[data.value].response)

    def _on_input_mode_changed(self, handle: int, event: Event) -> None:
        data = event.event_data
        if self.status_handle is None or not isinstance(data, Flag):
            return
        self.status_bar.set_label(self._status_text(insert=data.value))

    def _status_text(self, *, insert: bool) -> str:
        mode = "-- INSERT --" if insert else "-- NORMAL --"
        name = self.session_name or "redash"
        return (
            f" {name} @ {self.connection.endpoint}  {mode}  "
            "i: insert  Esc: normal  Tab: focus  Del: quit"
        )
