from __future__ import annotations

import pytest

from redash.tui.component import Position
from redash.tui.events import Event, EventType, Key, Number
from redash.tui.renderer import TextStyle
from redash.tui.selectable_list import SelectableList


def make_list(count: int, *, height: int = 5, interactive: bool = True) -> tuple[SelectableList, list[int]]:
    items = [f"item-{index}" for index in range(count)]
    widget = SelectableList("History", 20, height, items, interactive=interactive)
    widget.toggle_focus()
    changes: list[int] = []
    widget.add_event_listener(
        EventType.VALUE_CHANGED, lambda event: changes.append(event.event_data.value)
    )
    return widget, changes


def press(widget: SelectableList, key: Key, times: int = 1) -> None:
    for _ in range(times):
        widget.trigger(Event.key_press(key))


def assert_invariants(widget: SelectableList) -> None:
    count = len(widget)
    rows = widget.visible_rows
    assert 0 <= widget.value <= max(0, count - 1)
    assert 0 <= widget.viewport_top <= max(0, count - rows)
    if count:
        assert widget.viewport_top <= widget.value < widget.viewport_top + rows


def test_interactive_list_scrolls_one_row_at_a_time() -> None:
    widget, changes = make_list(10, height=5)

    press(widget, Key.DOWN, 3)

    assert widget.value == 3
    assert widget.viewport_top == 1
    assert widget.visible_items() == ("item-1", "item-2", "item-3")
    assert changes == [1, 2, 3]
    assert_invariants(widget)


def test_interactive_list_clamps_at_both_ends() -> None:
    widget, changes = make_list(4, height=5)

    press(widget, Key.UP)
    press(widget, Key.DOWN, 10)

    assert widget.value == 3
    assert widget.viewport_top == 1
    assert changes[0] == 0
    assert changes[-1] == 3
    assert_invariants(widget)

    press(widget, Key.UP, 10)
    assert widget.value == 0
    assert widget.viewport_top == 0
    assert_invariants(widget)


def test_invariants_hold_over_mixed_navigation() -> None:
    widget, _ = make_list(25, height=6)

    for key, times in [(Key.DOWN, 7), (Key.UP, 2), (Key.DOWN, 30), (Key.UP, 13), (Key.UP, 40)]:
        for _ in range(times):
            press(widget, key)
            assert_invariants(widget)


def test_passive_list_pages_and_never_fires_value_changed() -> None:
    widget, changes = make_list(20, height=7, interactive=False)

    assert widget.page_size == 4
    press(widget, Key.DOWN)
    assert (widget.value, widget.viewport_top) == (4, 0)
    press(widget, Key.DOWN)
    assert (widget.value, widget.viewport_top) == (8, 4)
    press(widget, Key.DOWN, 3)
    assert (widget.value, widget.viewport_top) == (19, 15)
    assert_invariants(widget)

    press(widget, Key.UP)
    assert (widget.value, widget.viewport_top) == (15, 15)
    press(widget, Key.UP)
    assert (widget.value, widget.viewport_top) == (11, 11)
    assert_invariants(widget)
    assert changes == []


def test_empty_list_navigation_is_silent() -> None:
    widget, changes = make_list(0)

    press(widget, Key.DOWN)
    press(widget, Key.UP)

    assert (widget.value, widget.viewport_top) == (0, 0)
    assert changes == []


def test_select_scrolls_target_into_view() -> None:
    widget, changes = make_list(12, height=5)

    widget.select(11)
    assert (widget.value, widget.viewport_top) == (11, 9)
    widget.select(2)
    assert (widget.value, widget.viewport_top) == (2, 2)
    widget.select(99)
    assert widget.value == 11
    assert changes == [11, 2, 11]


def test_replace_items_and_clear_reset_selection() -> None:
    widget, _ = make_list(12, height=5)
    widget.select(10)

    widget.replace_items(["PONG"])

    assert widget.items == ("PONG",)
    assert (widget.value, widget.viewport_top) == (0, 0)
    widget.clear()
    assert len(widget) == 0


def test_unfocused_list_ignores_keys() -> None:
    widget = SelectableList("History", 20, 5, ["a", "b"])

    assert not widget.trigger(Event.key_press(Key.DOWN))
    assert widget.value == 0


def test_only_arrow_keys_are_consumed() -> None:
    widget, _ = make_list(3)

    assert widget.trigger(Event.key_press(Key.DOWN))
    assert not widget.trigger(Event.key_press("j"))
    assert not widget.trigger(Event.key_press(Key.ENTER))
    assert widget.trigger(Event(EventType.FOCUS, Number(1)))


def test_scroll_proportion_tracks_viewport() -> None:
    widget, _ = make_list(10, height=5)

    assert widget.scroll_proportion() == 0.0
    widget.select(9)
    assert widget.scroll_proportion() == 1.0
    widget.select(4)
    assert widget.viewport_top == 4
    assert widget.scroll_proportion() == pytest.approx(4 / 7)

    short, _ = make_list(2, height=5)
    assert not short.is_overflowing()
    assert short.scroll_proportion() == 0.0


def test_render_draws_visible_slice_highlight_and_scrollbar(surface) -> None:
    widget, _ = make_list(10, height=5)
    widget.append_item("a very long history entry that overflows")
    widget.select(10)

    widget.render(surface, Position(3, 0))
    widget.render_focus(surface, Position(3, 0))

    assert surface.boxes == [(3, 0, 20, 5)]
    assert surface.scrollbars == [(4, 19, 3, 1.0)]
    rows = [drawn for drawn in surface.texts if drawn.left == 1]
    assert [drawn.text for drawn in rows] == ["item-8", "item-9", "a very long histo…"]
    assert len(rows[-1].text) == 18
    assert rows[-1].style is TextStyle.BOLD
    assert rows[-1].focused
    assert all(drawn.style is TextStyle.NORMAL for drawn in rows[:-1])
    assert surface.cursor == (6, 1)


def test_passive_render_has_no_highlight_and_cursor_on_value_row(surface) -> None:
    widget, _ = make_list(3, height=6, interactive=False)

    widget.render(surface, Position(0, 10))
    widget.render_focus(surface, Position(0, 10))

    assert surface.scrollbars == []
    rows = [drawn for drawn in surface.texts if drawn.left == 11]
    assert [drawn.text for drawn in rows] == ["item-0", "item-1", "item-2"]
    assert all(drawn.style is TextStyle.NORMAL for drawn in rows)
    assert surface.cursor == (1, 11)


@pytest.mark.parametrize(("width", "height"), [(2, 5), (10, 2)])
def test_too_small_list_is_rejected(width: int, height: int) -> None:
    with pytest.raises(ValueError):
        SelectableList("History", width, height)


def test_passive_cursor_follows_page_step_inside_viewport(surface) -> None:
    widget, _ = make_list(20, height=7, interactive=False)

    press(widget, Key.DOWN)
    widget.render_focus(surface, Position(0, 10))

    assert widget.viewport_top == 0
    assert surface.cursor == (1 + widget.page_size, 11)
