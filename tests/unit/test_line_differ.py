"""Tests for the line differ and change application."""

from manuscript.app.diff.line_differ import (
    DiffOp,
    apply_changes,
    diff,
    diff_to_changes,
    split_lines,
    to_changes,
)
from manuscript.app.models.common import ChangeStatus, ChangeType
from manuscript.app.models.documents import ChangeSnapshot


def test_split_lines_empty_text_has_no_lines() -> None:
    """Empty text is zero lines, not one empty line."""
    assert split_lines("") == []
    assert split_lines("a") == ["a"]
    assert split_lines("a\n") == ["a", ""]


def test_identical_texts_produce_only_equal_entries() -> None:
    text = "line1\nline2\nline3"
    entries = diff(text, text)

    assert [e.op for e in entries] == [DiffOp.equal] * 3
    assert to_changes(entries) == []


def test_single_line_modification() -> None:
    """A changed line is paired with its original as a replacement."""
    entries = diff("line1\nline2\nline3", "line1\nlineX\nline3")

    assert [e.op for e in entries] == [DiffOp.equal, DiffOp.replace, DiffOp.equal]
    replaced = entries[1]
    assert replaced.content == "lineX"
    assert replaced.original_content == "line2"
    assert replaced.original_index == 1
    assert replaced.modified_index == 1


def test_single_line_insertion_resynchronizes() -> None:
    changes = diff_to_changes("alpha\ngamma", "alpha\nbeta\ngamma")

    assert len(changes) == 1
    assert changes[0].type == ChangeType.addition
    assert changes[0].line_number == 2
    assert changes[0].content == "beta"
    assert changes[0].original_content is None


def test_single_line_deletion_uses_original_line_number() -> None:
    changes = diff_to_changes("alpha\nbeta\ngamma\ndelta", "alpha\ngamma\ndelta")

    assert len(changes) == 1
    assert changes[0].type == ChangeType.deletion
    assert changes[0].line_number == 2
    assert changes[0].content == "beta"


def test_empty_original_is_all_additions() -> None:
    changes = diff_to_changes("", "first\nsecond")

    assert [c.type for c in changes] == [ChangeType.addition, ChangeType.addition]
    assert [c.line_number for c in changes] == [1, 2]


def test_empty_modified_is_all_deletions() -> None:
    changes = diff_to_changes("first\nsecond", "")

    assert [c.type for c in changes] == [ChangeType.deletion, ChangeType.deletion]
    assert [c.line_number for c in changes] == [1, 2]


def test_both_empty_produces_nothing() -> None:
    assert diff("", "") == []


def test_multi_line_insertion_cascades_into_replacements() -> None:
    """Two inserted lines are beyond the one-line lookahead.

    The walk pairs the first inserted line with the next original line and
    reports the rest as trailing additions.
    """
    entries = diff("start\nend", "start\nnew one\nnew two\nend")

    assert [e.op for e in entries] == [
        DiffOp.equal,
        DiffOp.replace,
        DiffOp.insert,
        DiffOp.insert,
    ]
    changes = to_changes(entries)
    assert [(c.type, c.line_number) for c in changes] == [
        (ChangeType.modification, 2),
        (ChangeType.addition, 3),
        (ChangeType.addition, 4),
    ]
    assert changes[0].original_content == "end"


def test_changes_are_pending_with_sequential_ids() -> None:
    changes = diff_to_changes("a\nb\nc", "a\nB\nc\nd")

    assert [c.id for c in changes] == ["1", "2"]
    assert all(c.status == ChangeStatus.pending for c in changes)


def test_line_numbers_resolve_against_their_text() -> None:
    original = "one\ntwo\nthree\nfour"
    modified = "one\n2\nthree\nfour\nfive"
    original_lines = original.split("\n")
    modified_lines = modified.split("\n")

    for change in diff_to_changes(original, modified):
        if change.type == ChangeType.deletion:
            assert original_lines[change.line_number - 1] == change.content
        else:
            assert modified_lines[change.line_number - 1] == change.content


def _change(
    change_type: ChangeType,
    line_number: int,
    status: ChangeStatus,
    content: str = "",
    original_content: str | None = None,
) -> ChangeSnapshot:
    return ChangeSnapshot(
        type=change_type,
        line_number=line_number,
        content=content,
        original_content=original_content,
        status=status,
    )


def test_apply_rejected_modification_restores_original() -> None:
    result = apply_changes(
        "line1\nlineX\nline3",
        [_change(ChangeType.modification, 2, ChangeStatus.rejected, "lineX", "line2")],
    )

    assert result == "line1\nline2\nline3"


def test_apply_accepted_modification_keeps_edit() -> None:
    result = apply_changes(
        "line1\nlineX\nline3",
        [_change(ChangeType.modification, 2, ChangeStatus.accepted, "lineX", "line2")],
    )

    assert result == "line1\nlineX\nline3"


def test_apply_rejected_addition_drops_line() -> None:
    result = apply_changes(
        "alpha\nbeta\ngamma",
        [_change(ChangeType.addition, 2, ChangeStatus.rejected, "beta")],
    )

    assert result == "alpha\ngamma"


def test_apply_accepted_deletion_drops_line() -> None:
    result = apply_changes(
        "alpha\nbeta\ngamma",
        [_change(ChangeType.deletion, 2, ChangeStatus.accepted, "beta")],
    )

    assert result == "alpha\ngamma"


def test_apply_pending_changes_leave_text_alone() -> None:
    text = "alpha\nbeta"
    changes = [
        _change(ChangeType.deletion, 1, ChangeStatus.pending, "alpha"),
        _change(ChangeType.modification, 2, ChangeStatus.pending, "beta", "old"),
    ]

    assert apply_changes(text, changes) == text


def test_apply_ignores_out_of_range_lines() -> None:
    text = "alpha\nbeta"
    changes = [
        _change(ChangeType.deletion, 9, ChangeStatus.accepted, "ghost"),
        _change(ChangeType.modification, 5, ChangeStatus.rejected, "x", "y"),
    ]

    assert apply_changes(text, changes) == text
