"""Line-level diff between two text blobs and conversion to reviewable changes.

The walk is a greedy heuristic with a single line of lookahead on each side,
not a minimal edit script:

- equal lines advance both cursors;
- if the *next* original line matches the current modified line, the current
  original line is reported as deleted;
- else if the *next* modified line matches the current original line, the
  current modified line is reported as inserted;
- otherwise the pair is reported as a replacement.

It only resynchronizes after single-line insertions or deletions. A multi-line
insertion or deletion shows up as a run of replacements. Stored change line
numbers depend on this exact behaviour, so keep it unless every stored
revision is migrated.
"""

from dataclasses import dataclass
from enum import Enum

from manuscript.app.models.common import ChangeStatus, ChangeType
from manuscript.app.models.documents import ChangeSnapshot


class DiffOp(str, Enum):
    """Diff entry kind."""

    equal = "equal"
    insert = "insert"
    delete = "delete"
    replace = "replace"


@dataclass(frozen=True)
class DiffEntry:
    """One step of the line walk.

    Indexes are 0-based positions in the original/modified line sequences;
    an index is None when the entry has no line on that side.
    """

    op: DiffOp
    content: str
    original_index: int | None = None
    modified_index: int | None = None
    original_content: str | None = None


_OP_TO_CHANGE_TYPE = {
    DiffOp.insert: ChangeType.addition,
    DiffOp.delete: ChangeType.deletion,
    DiffOp.replace: ChangeType.modification,
}


def split_lines(text: str) -> list[str]:
    """Split on newline; the empty string has no lines."""
    if text == "":
        return []
    return text.split("\n")


def diff(original: str, modified: str) -> list[DiffEntry]:
    """Compute the line diff between original and modified text. Never raises."""
    a = split_lines(original)
    b = split_lines(modified)
    entries: list[DiffEntry] = []
    i = 0
    j = 0

    while i < len(a) or j < len(b):
        if i >= len(a):
            entries.append(DiffEntry(DiffOp.insert, b[j], modified_index=j))
            j += 1
        elif j >= len(b):
            entries.append(DiffEntry(DiffOp.delete, a[i], original_index=i))
            i += 1
        elif a[i] == b[j]:
            entries.append(DiffEntry(DiffOp.equal, a[i], original_index=i, modified_index=j))
            i += 1
            j += 1
        elif i + 1 < len(a) and a[i + 1] == b[j]:
            entries.append(DiffEntry(DiffOp.delete, a[i], original_index=i))
            i += 1
        elif j + 1 < len(b) and b[j + 1] == a[i]:
            entries.append(DiffEntry(DiffOp.insert, b[j], modified_index=j))
            j += 1
        else:
            entries.append(
                DiffEntry(
                    DiffOp.replace,
                    b[j],
                    original_index=i,
                    modified_index=j,
                    original_content=a[i],
                )
            )
            i += 1
            j += 1

    return entries


def to_changes(entries: list[DiffEntry]) -> list[ChangeSnapshot]:
    """Convert diff entries to pending changes, skipping equal lines.

    Line numbers are 1-based: deletions count on the original side, additions
    and modifications on the modified side. Ids are sequential strings.
    """
    changes: list[ChangeSnapshot] = []

    for entry in entries:
        change_type = _OP_TO_CHANGE_TYPE.get(entry.op)
        if change_type is None:
            continue

        if entry.op is DiffOp.delete:
            index = entry.original_index
        else:
            index = entry.modified_index

        changes.append(
            ChangeSnapshot(
                id=str(len(changes) + 1),
                type=change_type,
                line_number=(index or 0) + 1,
                content=entry.content,
                original_content=entry.original_content,
                status=ChangeStatus.pending,
            )
        )

    return changes


def diff_to_changes(original: str, modified: str) -> list[ChangeSnapshot]:
    """Shorthand for ``to_changes(diff(original, modified))``."""
    return to_changes(diff(original, modified))


def apply_changes(content: str, changes: list[ChangeSnapshot]) -> str:
    """Apply review decisions to the modified text.

    Accepted deletions drop their line, rejected additions drop the added
    line and rejected modifications restore the original line. Accepted
    additions/modifications and pending changes are already reflected in the
    text. Out-of-range line numbers are ignored.
    """
    lines = content.split("\n")

    for change in changes:
        if change.status is ChangeStatus.accepted and change.type is ChangeType.deletion:
            _remove_line(lines, change.line_number)

    for change in changes:
        if change.status is not ChangeStatus.rejected:
            continue
        if change.type is ChangeType.addition:
            _remove_line(lines, change.line_number)
        elif change.type is ChangeType.modification and change.original_content:
            index = change.line_number - 1
            if 0 <= index < len(lines):
                lines[index] = change.original_content

    return "\n".join(lines)


def _remove_line(lines: list[str], line_number: int) -> None:
    index = line_number - 1
    if 0 <= index < len(lines):
        del lines[index]
