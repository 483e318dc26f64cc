"""Tests for :mod:`htmlrefs.highlight.tracker`."""

from __future__ import annotations

from typing import Callable

from htmlrefs.core.config import HighlightSettings, ReuseScope
from htmlrefs.document import DocumentTree
from htmlrefs.highlight import HighlightTracker, SymbolKind, SymbolRole
from htmlrefs.text import Span, TextBuffer

MARKUP = '<p class="note">a</p><p class="note big">b</p>'


def _tracker(**kwargs: object) -> tuple[HighlightTracker, list[Span]]:
    tracker = HighlightTracker(TextBuffer(MARKUP), **kwargs)  # type: ignore[arg-type]
    notifications: list[Span] = []
    tracker.subscribe(notifications.append)
    return tracker, notifications


def test_recompute_notifies_once_with_whole_document(
    value_at: Callable[..., int],
) -> None:
    tracker, notifications = _tracker()

    state = tracker.caret_moved(value_at(MARKUP, 'class="note"'))

    assert state.symbol is not None and state.symbol.kind is SymbolKind.CLASS_NAME
    assert notifications == [Span(0, len(MARKUP), 0)]
    assert tracker.tags().spans(SymbolRole.REFERENCE) == [
        Span(value_at(MARKUP, 'class="note"'), 4),
        Span(value_at(MARKUP, 'class="note big"'), 4),
    ]


def test_skipped_and_ignored_events_do_not_notify(
    value_at: Callable[..., int],
) -> None:
    tracker, notifications = _tracker()
    start = value_at(MARKUP, 'class="note"')
    tracker.caret_moved(start)

    tracker.caret_moved(start + 2)
    tracker.caret_moved(value_at(MARKUP, 'class="note big"') + 1)
    tracker.caret_moved(None)
    tracker.layout_changed(old_version=0, caret_offset=start)

    assert len(notifications) == 1


def test_moving_off_a_symbol_clears_and_notifies() -> None:
    tracker, notifications = _tracker()
    tracker.caret_moved(MARKUP.index('"note"') + 1)

    state = tracker.caret_moved(MARKUP.index(">a<") + 1)

    assert state.is_empty
    assert len(notifications) == 2
    assert list(tracker.tags()) == []


def test_tags_translate_state_after_edit(value_at: Callable[..., int]) -> None:
    tracker, _ = _tracker()
    tracker.caret_moved(value_at(MARKUP, 'class="note"'))

    tracker.buffer.insert(0, "<br>")
    spans = tracker.tags().spans()

    assert spans == [
        Span(value_at(MARKUP, 'class="note"') + 4, 4, 1),
        Span(value_at(MARKUP, 'class="note big"') + 4, 4, 1),
    ]
    assert tracker.state.version == 1
    assert tracker.state.computed_version == 0
    assert tracker.buffer.oldest_version == 1


def test_caret_inside_translated_span_recomputes(value_at: Callable[..., int]) -> None:
    tracker, notifications = _tracker()
    first = value_at(MARKUP, 'class="note"')
    tracker.caret_moved(first)

    tracker.buffer.insert(0, "<br>")
    list(tracker.tags())
    state = tracker.caret_moved(first + 5)

    assert len(notifications) == 2
    assert state.computed_version == 1
    assert state.symbol is not None and state.symbol.value == "note"


def test_tags_drop_spans_touched_by_edit(value_at: Callable[..., int]) -> None:
    tracker, _ = _tracker()
    first = value_at(MARKUP, 'class="note"')
    tracker.caret_moved(first)

    tracker.buffer.insert(first + 2, "X")

    assert tracker.tags().spans() == [
        Span(value_at(MARKUP, 'class="note big"') + 1, 4, 1),
    ]


def test_layout_change_recomputes_against_new_text(
    value_at: Callable[..., int],
) -> None:
    tracker, notifications = _tracker()
    first = value_at(MARKUP, 'class="note"')
    tracker.caret_moved(first)
    tracker.buffer.insert(0, "<br>")

    state = tracker.layout_changed(old_version=0, caret_offset=first + 4)

    assert state.version == 1
    assert state.symbol is not None and state.symbol.value == "note"
    assert len(state.references) == 2
    assert notifications[-1] == Span(0, len(MARKUP) + 4, 1)
    assert len(notifications) == 2


def test_unsubscribe_stops_notifications(value_at: Callable[..., int]) -> None:
    tracker = HighlightTracker(TextBuffer(MARKUP))
    received: list[Span] = []
    unsubscribe = tracker.subscribe(received.append)

    unsubscribe()
    unsubscribe()
    tracker.caret_moved(value_at(MARKUP, 'class="note"'))

    assert received == []


def test_custom_tree_provider_is_used(
    parse: Callable[..., DocumentTree],
    value_at: Callable[..., int],
) -> None:
    calls: list[int] = []
    tree = parse(MARKUP)

    def _provider() -> DocumentTree:
        calls.append(1)
        return tree

    tracker, _ = _tracker(tree_provider=_provider)
    tracker.caret_moved(value_at(MARKUP, 'class="note"'))

    assert calls == [1]


def test_settings_control_reuse(value_at: Callable[..., int]) -> None:
    markup = '<div id="k"></div><label for="k">k</label>'
    tracker = HighlightTracker(
        TextBuffer(markup),
        settings=HighlightSettings(reuse_scope=ReuseScope.CLASS_NAME),
    )
    notifications: list[Span] = []
    tracker.subscribe(notifications.append)

    tracker.caret_moved(value_at(markup, 'id="k"'))
    tracker.caret_moved(value_at(markup, 'for="k"'))

    assert len(notifications) == 2


RADIO_MARKUP = '<input type="radio" name="g"><input type="text" name="g">'


def _radio_tracker_after_type_edit(
    value_at: Callable[..., int],
) -> tuple[HighlightTracker, int]:
    tracker = HighlightTracker(TextBuffer(RADIO_MARKUP))
    caret = value_at(RADIO_MARKUP, 'name="g"')
    state = tracker.caret_moved(caret)
    assert len(state.references) == 1

    position = RADIO_MARKUP.index('"text"') + 1
    tracker.buffer.apply_edit(position, len("text"), "radio")
    list(tracker.tags())
    return tracker, caret


def test_radio_type_change_picked_up_after_layout_change(
    value_at: Callable[..., int],
) -> None:
    tracker, caret = _radio_tracker_after_type_edit(value_at)

    state = tracker.layout_changed(old_version=0, caret_offset=caret)

    assert state.version == 1
    assert state.references == (
        Span(caret, 1, 1),
        Span(tracker.buffer.text.rindex('name="g"') + 6, 1, 1),
    )


def test_radio_type_change_picked_up_after_caret_move(
    value_at: Callable[..., int],
) -> None:
    tracker, caret = _radio_tracker_after_type_edit(value_at)

    state = tracker.caret_moved(caret)

    assert len(state.references) == 2
    assert state.symbol is not None
    assert state.symbol.kind is SymbolKind.RADIO_GROUP_NAME


def test_new_class_reference_found_after_edit_and_render(
    value_at: Callable[..., int],
) -> None:
    markup = '<p class="foo">a</p>'
    tracker = HighlightTracker(TextBuffer(markup))
    caret = value_at(markup, 'class="foo"')
    tracker.caret_moved(caret)

    tracker.buffer.insert(len(markup), '<i class="foo"></i>')
    list(tracker.tags())
    state = tracker.caret_moved(caret + 1)

    assert state.references == (
        Span(caret, 3, 1),
        Span(tracker.buffer.text.rindex("foo"), 3, 1),
    )
