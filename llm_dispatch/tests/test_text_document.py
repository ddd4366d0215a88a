"""In-memory document: line edits and tracked anchor positions."""

from __future__ import annotations

import pytest

from llm_dispatch.base.render import TextDocument, TextViewport, TrackedPosition


def test_position_before_edit_is_unchanged():
    pos = TrackedPosition(2)
    pos.shift(5, 7, 1)
    assert pos.line == 2  # nosec B101


@pytest.mark.parametrize("right_gravity, expected", [(False, 3), (True, 5)])
def test_pure_insertion_at_position_respects_gravity(right_gravity, expected):
    pos = TrackedPosition(3, right_gravity=right_gravity)
    pos.shift(3, 3, 2)
    assert pos.line == expected  # nosec B101


def test_position_inside_replaced_range_collapses_to_start():
    pos = TrackedPosition(4)
    pos.shift(2, 6, 1)
    assert pos.line == 2  # nosec B101


def test_position_after_edit_shifts_by_delta():
    pos = TrackedPosition(10)
    pos.shift(2, 4, 5)
    assert pos.line == 13  # nosec B101
    pos.shift(0, 3, 0)
    assert pos.line == 10  # nosec B101


def test_set_lines_replaces_half_open_range():
    doc = TextDocument(["a", "b", "c", "d"])
    doc.set_lines(1, 3, ["X"])
    assert doc.get_lines() == ["a", "X", "d"]  # nosec B101
    assert doc.text == "a\nX\nd"  # nosec B101
    assert doc.edits == 1  # nosec B101


def test_bounds_are_clamped_and_document_never_empty():
    doc = TextDocument(["only"])
    doc.set_lines(0, 10, [])
    assert doc.get_lines() == [""]  # nosec B101
    doc.set_lines(5, 9, ["tail"])
    assert doc.get_lines() == ["", "tail"]  # nosec B101


def test_anchor_groups_track_and_clear():
    doc = TextDocument(["a", "b", "c"])
    group = doc.create_anchor_group("resp")
    anchor = doc.set_anchor(group, 2)
    doc.set_lines(0, 0, ["new"])
    assert doc.anchor_line(group, anchor) == 3  # nosec B101
    doc.clear_anchor_group(group)
    assert doc.anchors(group) == {}  # nosec B101
    with pytest.raises(KeyError):
        doc.anchor_line(group, anchor)


def test_closed_document_rejects_edits():
    doc = TextDocument(["a"])
    doc.close()
    assert doc.is_valid() is False  # nosec B101
    with pytest.raises(ValueError):
        doc.set_lines(0, 1, ["b"])


def test_viewport_cursor_is_clamped():
    doc = TextDocument(["a", "b"])
    view = TextViewport(doc)
    view.set_cursor(10)
    assert view.cursor_line() == 1  # nosec B101
    view.set_cursor(-3)
    assert view.cursor_line() == 0  # nosec B101
