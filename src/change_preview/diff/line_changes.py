"""
Line-level change detection.

Wraps :class:`difflib.SequenceMatcher` and reports its opcodes as an
ordered stream of :class:`ChangeSegment` objects. A ``replace`` opcode
is reported as a ``removed`` segment followed by an ``added`` segment,
so consumers only ever see the three segment kinds.
"""

from __future__ import annotations

import re
from difflib import SequenceMatcher
from typing import List

from change_preview.diff.models import ChangeSegment, SegmentKind

_WHITESPACE = re.compile(r"\s+")


def split_lines(text: str) -> List[str]:
    """Split ``text`` on ``\\n`` keeping the terminators.

    Only ``\\n`` separates lines, so ``\\r`` and other Unicode line
    breaks stay part of the line content. A trailing newline does not
    produce an empty final line.

    >>> split_lines("a\\nb")
    ['a\\n', 'b']
    """
    if not text:
        return []
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _normalise(line: str) -> str:
    return _WHITESPACE.sub(" ", line).strip()


def line_changes(original: str, modified: str, ignore_whitespace: bool = False) -> List[ChangeSegment]:
    """Return the change segments turning ``original`` into ``modified``.

    With ``ignore_whitespace`` lines are compared with whitespace runs
    collapsed; equal runs then carry the original text.
    """
    original_lines = split_lines(original)
    modified_lines = split_lines(modified)
    if ignore_whitespace:
        a = [_normalise(line) for line in original_lines]
        b = [_normalise(line) for line in modified_lines]
    else:
        a, b = original_lines, modified_lines

    matcher = SequenceMatcher(None, a, b, autojunk=False)
    segments: List[ChangeSegment] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            segments.append(ChangeSegment(SegmentKind.EQUAL, original_lines[i1:i2]))
            continue
        if i2 > i1:
            segments.append(ChangeSegment(SegmentKind.REMOVED, original_lines[i1:i2]))
        if j2 > j1:
            segments.append(ChangeSegment(SegmentKind.ADDED, modified_lines[j1:j2]))
    return segments
