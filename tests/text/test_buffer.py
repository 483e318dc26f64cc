"""Tests for :mod:`htmlrefs.text.buffer`."""

from __future__ import annotations

import pytest

from htmlrefs.text import Span, TextBuffer


def test_apply_edit_advances_version_and_records_change() -> None:
    buffer = TextBuffer("hello world")

    change = buffer.apply_edit(6, 5, "there")

    assert buffer.text == "hello there"
    assert buffer.version == 1
    assert change.position == 6
    assert change.old_length == 5
    assert change.new_length == 5
    assert buffer.changes_between(0, 1) == (change,)


def test_insert_and_delete_helpers() -> None:
    buffer = TextBuffer("abc")

    buffer.insert(0, "xy")
    buffer.delete(4, 1)

    assert buffer.text == "xyab"
    assert buffer.version == 2
    assert buffer.full_span() == Span(0, 4, 2)


def test_apply_edit_outside_text_raises() -> None:
    buffer = TextBuffer("abc")

    with pytest.raises(ValueError):
        buffer.apply_edit(2, 5, "")
    with pytest.raises(ValueError):
        buffer.insert(-1, "x")
    assert buffer.version == 0


def test_translate_span_follows_recorded_history() -> None:
    buffer = TextBuffer('<div class="foo"></div>')
    span = Span(12, 3, buffer.version)

    buffer.insert(0, "<p></p>")

    assert buffer.translate_span(span) == Span(19, 3, 1)
    assert buffer.text[19:22] == "foo"


def test_translate_span_drops_span_edited_in_place() -> None:
    buffer = TextBuffer('<div class="foo"></div>')
    span = Span(12, 3, buffer.version)

    buffer.insert(13, "x")

    assert buffer.translate_span(span) is None


def test_translate_span_to_intermediate_version() -> None:
    buffer = TextBuffer("0123456789")
    span = Span(5, 2, 0)
    buffer.insert(0, "a")
    buffer.insert(0, "b")

    assert buffer.translate_span(span, 1) == Span(6, 2, 1)
    assert buffer.translate_span(span) == Span(7, 2, 2)


def test_changes_between_validates_range() -> None:
    buffer = TextBuffer("abc", version=3)
    buffer.insert(0, "x")

    with pytest.raises(ValueError):
        buffer.changes_between(2, 4)
    with pytest.raises(ValueError):
        buffer.changes_between(4, 3)
    assert len(buffer.changes_between(3, 4)) == 1


def test_discard_history_forgets_older_versions() -> None:
    buffer = TextBuffer("abcdef")
    buffer.insert(0, "x")
    buffer.insert(0, "y")
    buffer.insert(0, "z")

    assert buffer.discard_history(2) == 2
    assert buffer.oldest_version == 2
    assert buffer.translate_span(Span(3, 1, 2)) == Span(4, 1, 3)
    with pytest.raises(ValueError):
        buffer.translate_span(Span(3, 1, 1))
    assert buffer.discard_history(1) == 0
    with pytest.raises(ValueError):
        buffer.discard_history(4)
