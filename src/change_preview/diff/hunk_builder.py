"""
Hunk construction.

The :class:`HunkBuilder` windows a stream of line change segments into
hunks: contiguous blocks of added and deleted lines surrounded by up to
``context_lines`` lines of unchanged context. Change clusters separated
by no more than :data:`HUNK_MERGE_THRESHOLD` untouched lines share one
hunk; the untouched lines between them become context so every hunk
stays contiguous and the result can be written out as a valid patch.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from change_preview.config.loader import ConfigError
from change_preview.diff.line_changes import line_changes, split_lines
from change_preview.diff.models import Change, ChangeSegment, ChangeType, Hunk, SegmentKind


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# Untouched original lines allowed between two change clusters of one
# hunk. Tunable heuristic; without context lines clusters never merge.
HUNK_MERGE_THRESHOLD = 6

# (text, original line, modified line)
_PendingLine = Tuple[str, int, int]


def _make_change(
    change_type: ChangeType,
    line: str,
    original_line: Optional[int],
    modified_line: Optional[int],
) -> Change:
    has_newline = line.endswith("\n")
    return Change(
        type=change_type,
        content=line[:-1] if has_newline else line,
        original_line=original_line,
        modified_line=modified_line,
        missing_newline=not has_newline,
    )


class HunkBuilder:
    """Build hunks from line change segments.

    Parameters
    ----------
    context_lines : int
        Number of unchanged lines kept before and after each change
        cluster. Must not be negative.

    Raises
    ------
    ConfigError
        If ``context_lines`` is negative or not an integer.
    """

    def __init__(self, context_lines: int = 3) -> None:
        if not isinstance(context_lines, int) or isinstance(context_lines, bool) or context_lines < 0:
            raise ConfigError(f"context_lines must be a non-negative integer (got {context_lines!r})")
        self.context_lines = context_lines
        self.merge_threshold = HUNK_MERGE_THRESHOLD if context_lines else 0

    def build(self, segments: Sequence[ChangeSegment], original_lines: Sequence[str]) -> List[Hunk]:
        """Window ``segments`` into hunks.

        ``original_lines`` is the original text split with
        :func:`~change_preview.diff.line_changes.split_lines`; leading
        context is read from it directly.
        """
        hunks: List[Hunk] = []
        current: Optional[Hunk] = None
        line_original = 1
        line_modified = 1
        # Original-axis cursor right after the last add/delete change.
        last_change_original = 1
        # First original line not yet shown by a closed hunk.
        floor = 1
        pending: List[_PendingLine] = []

        for segment in segments:
            if not segment.lines:
                continue

            if segment.kind is SegmentKind.EQUAL:
                if current is not None:
                    for offset, line in enumerate(segment.lines):
                        pending.append((line, line_original + offset, line_modified + offset))
                line_original += len(segment.lines)
                line_modified += len(segment.lines)
                continue

            if current is not None:
                gap = line_original - last_change_original
                if gap <= self.merge_threshold:
                    self._append_context(current, pending)
                else:
                    floor = self._close(current, pending, hunks)
                    current = None
                pending = []

            if current is None:
                current = self._open(original_lines, line_original, line_modified, floor)

            for line in segment.lines:
                if segment.kind is SegmentKind.ADDED:
                    current.changes.append(_make_change(ChangeType.ADD, line, None, line_modified))
                    current.additions += 1
                    line_modified += 1
                else:
                    current.changes.append(_make_change(ChangeType.DELETE, line, line_original, None))
                    current.deletions += 1
                    line_original += 1
                current.end_line = line_original + self.context_lines
            last_change_original = line_original

        if current is not None:
            self._close(current, pending, hunks)

        logger.debug("Built %d hunk(s) with %d context line(s)", len(hunks), self.context_lines)
        return hunks

    def _open(self, original_lines: Sequence[str], line_original: int, line_modified: int, floor: int) -> Hunk:
        """Open a hunk at the cursors, pre-filled with leading context."""
        start = max(1, floor, line_original - self.context_lines)
        # The lines before the first change are unchanged, so both sides
        # are shifted by the same amount.
        shift = line_modified - line_original
        hunk = Hunk(
            start_line=start,
            end_line=line_original + self.context_lines,
            modified_start=start + shift,
        )
        for number in range(start, line_original):
            hunk.changes.append(
                _make_change(ChangeType.CONTEXT, original_lines[number - 1], number, number + shift)
            )
        return hunk

    def _close(self, hunk: Hunk, pending: List[_PendingLine], hunks: List[Hunk]) -> int:
        """Add trailing context, emit ``hunk`` and return the new floor."""
        trailing = pending[: self.context_lines]
        self._append_context(hunk, trailing)
        if hunk.additions or hunk.deletions:
            hunks.append(hunk)
        last_original = max(
            (c.original_line for c in hunk.changes if c.original_line is not None),
            default=hunk.start_line - 1,
        )
        return last_original + 1

    @staticmethod
    def _append_context(hunk: Hunk, lines: Sequence[_PendingLine]) -> None:
        for text, original_line, modified_line in lines:
            hunk.changes.append(_make_change(ChangeType.CONTEXT, text, original_line, modified_line))


def build_hunks(
    original: str,
    modified: str,
    context_lines: int = 3,
    ignore_whitespace: bool = False,
) -> List[Hunk]:
    """Diff two texts and return their hunks.

    This runs the line change source and feeds its segments to a
    :class:`HunkBuilder`.
    """
    builder = HunkBuilder(context_lines)
    segments = line_changes(original, modified, ignore_whitespace=ignore_whitespace)
    return builder.build(segments, split_lines(original))
