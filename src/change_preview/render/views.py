"""
Structured views for interactive display.

Side-by-side and inline views are typed structures rather than text so a
front end can lay them out freely. Line numbers are taken from the
changes themselves, never recomputed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from change_preview.diff.models import ChangeType, FileDiff
from change_preview.render.unified import RenderError


@dataclass(frozen=True)
class SideLine:
    content: str
    type: str  # normal, added, deleted, modified, empty
    line_number: Optional[int] = None
    highlight: bool = False


@dataclass(frozen=True)
class SideContent:
    title: str
    lines: List[SideLine] = field(default_factory=list)
    language: Optional[str] = None


@dataclass(frozen=True)
class SideBySideView:
    left: SideContent
    right: SideContent
    synchronized_scrolling: bool = True


@dataclass(frozen=True)
class InlineLine:
    line_number: int
    content: str
    type: str  # context, addition, deletion, modification
    old_content: Optional[str] = None


@dataclass(frozen=True)
class InlineView:
    title: str
    lines: List[InlineLine] = field(default_factory=list)
    language: Optional[str] = None


_EMPTY = SideLine(content="", type="empty")


def format_side_by_side(file_diff: FileDiff) -> SideBySideView:
    """Render a file diff as two aligned columns.

    An addition leaves an empty slot on the left, a deletion one on the
    right, so both columns always have the same length.
    """
    left: List[SideLine] = []
    right: List[SideLine] = []
    for hunk in file_diff.hunks:
        for change in hunk.changes:
            if change.type is ChangeType.CONTEXT:
                left.append(SideLine(change.content, "normal", change.original_line))
                right.append(SideLine(change.content, "normal", change.modified_line))
            elif change.type is ChangeType.DELETE:
                left.append(SideLine(change.content, "deleted", change.original_line, True))
                right.append(_EMPTY)
            elif change.type is ChangeType.ADD:
                left.append(_EMPTY)
                right.append(SideLine(change.content, "added", change.modified_line, True))
            elif change.type is ChangeType.MODIFY:
                left.append(SideLine(change.content, "modified", change.original_line, True))
                right.append(SideLine(change.content, "modified", change.modified_line, True))
            else:
                raise RenderError(f"Unknown change type: {change.type!r}")

    return SideBySideView(
        left=SideContent(title="Original", lines=left, language=file_diff.language),
        right=SideContent(title="Modified", lines=right, language=file_diff.language),
    )


_INLINE_TYPES = {
    ChangeType.CONTEXT: "context",
    ChangeType.ADD: "addition",
    ChangeType.DELETE: "deletion",
    ChangeType.MODIFY: "modification",
}


def format_inline(file_diff: FileDiff) -> InlineView:
    """Render a file diff as a single interleaved column.

    Deletions carry their original line number, everything else the
    modified one.
    """
    lines: List[InlineLine] = []
    for hunk in file_diff.hunks:
        for change in hunk.changes:
            try:
                kind = _INLINE_TYPES[change.type]
            except KeyError:
                raise RenderError(f"Unknown change type: {change.type!r}") from None
            number = change.original_line if change.type is ChangeType.DELETE else change.modified_line
            lines.append(InlineLine(line_number=number, content=change.content, type=kind))
    return InlineView(title=file_diff.path, lines=lines, language=file_diff.language)


_SIDE_MARKS = {"normal": " ", "added": "+", "deleted": "-", "modified": "!", "empty": " "}
_INLINE_MARKS = {"context": " ", "addition": "+", "deletion": "-", "modification": "!"}


def _number(value: Optional[int], width: int) -> str:
    return str(value).rjust(width) if value is not None else " " * width


def side_by_side_to_text(view: SideBySideView, column_width: int = 40) -> str:
    """Lay a side-by-side view out as fixed-width text for a terminal."""
    rows = [f"{view.left.title.ljust(column_width + 7)} | {view.right.title}"]
    for left, right in zip(view.left.lines, view.right.lines):
        left_text = left.content[:column_width].ljust(column_width)
        rows.append(
            f"{_number(left.line_number, 4)} {_SIDE_MARKS[left.type]} {left_text} | "
            f"{_number(right.line_number, 4)} {_SIDE_MARKS[right.type]} {right.content}"
        )
    return "\n".join(rows) + "\n"


def inline_to_text(view: InlineView) -> str:
    """Lay an inline view out as text, one numbered line per entry."""
    rows = [view.title]
    rows.extend(
        f"{_number(line.line_number, 4)} {_INLINE_MARKS[line.type]} {line.content}"
        for line in view.lines
    )
    return "\n".join(rows) + "\n"
