"""Tests for the line change classifier."""

from scat.core.changes import classify_changes
from scat.models import ChangeTag, DeletionMarker, LineChanges

U = ChangeTag.UNCHANGED
A = ChangeTag.ADDED
M = ChangeTag.MODIFIED


def _lines(*items: str) -> list[bytes]:
    return [item.encode() for item in items]


def test_identical_content_is_unchanged() -> None:
    changes = classify_changes(_lines("a", "b", "c"), _lines("a", "b", "c"))
    assert changes.tags == (U, U, U)
    assert changes.deletions == ()


def test_changed_in_place_line_is_modified() -> None:
    changes = classify_changes(_lines("a", "b", "c"), _lines("a", "x", "c"))
    assert changes.tags == (U, M, U)
    assert changes.deletions == ()


def test_appended_line_is_added() -> None:
    changes = classify_changes(_lines("a", "b"), _lines("a", "b", "c"))
    assert changes.tags == (U, U, A)
    assert changes.deletions == ()


def test_removed_line_produces_deletion_marker() -> None:
    changes = classify_changes(_lines("a", "b", "c"), _lines("a", "c"))
    assert changes.tags == (U, U)
    assert changes.deletions == (DeletionMarker(after_line=1, count=1),)
    assert M not in changes.tags


def test_untracked_file_is_all_unchanged() -> None:
    changes = classify_changes(None, _lines("a", "b"))
    assert changes.tags == (U, U)
    assert changes.deletions == ()


def test_empty_current_file_anchors_deletions_at_zero() -> None:
    changes = classify_changes(_lines("a", "b"), [])
    assert changes.tags == ()
    assert changes.deletions == (DeletionMarker(after_line=0, count=2),)


def test_deletion_at_top_of_file() -> None:
    changes = classify_changes(_lines("header", "a", "b"), _lines("a", "b"))
    assert changes.tags == (U, U)
    assert changes.deletions == (DeletionMarker(after_line=0, count=1),)


def test_replaced_run_with_surplus_old_lines() -> None:
    changes = classify_changes(_lines("a", "b", "c", "d"), _lines("a", "x", "d"))
    assert changes.tags == (U, M, U)
    assert changes.deletions == (DeletionMarker(after_line=2, count=1),)


def test_replaced_run_with_surplus_new_lines() -> None:
    changes = classify_changes(_lines("a", "b", "c"), _lines("a", "x", "y", "c"))
    assert changes.tags == (U, M, A, U)
    assert changes.deletions == ()


def test_new_file_in_repository_is_all_added() -> None:
    changes = classify_changes([], _lines("a", "b"))
    assert changes.tags == (A, A)


def test_lines_compare_as_bytes() -> None:
    changes = classify_changes([b"a\r", b"\xff"], [b"a", b"\xff"])
    assert changes.tags == (M, U)


def test_line_changes_lookups() -> None:
    changes = LineChanges(tags=(U, A), deletions=(DeletionMarker(after_line=2, count=3),))
    assert changes.tag_for(2) is A
    assert changes.tag_for(0) is U
    assert changes.tag_for(99) is U
    assert changes.deletions_after(2) == [DeletionMarker(after_line=2, count=3)]
    assert changes.deletions_after(1) == []
    assert LineChanges.untracked(3).tags == (U, U, U)
