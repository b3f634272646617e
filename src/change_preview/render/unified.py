"""
Unified diff rendering.

The unified text is the portable interchange format of a preview: it can
be applied with ``patch -p1`` or ``git apply``. The other text renderers
reuse :func:`hunk_header`, :func:`change_prefix` and :func:`hunk_lines`
so every format shows the same lines in the same order.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from change_preview.diff.models import Change, ChangeType, FileDiff, Hunk

NO_NEWLINE_MARKER = "\\ No newline at end of file"

_PREFIXES = {
    ChangeType.ADD: "+",
    ChangeType.DELETE: "-",
    ChangeType.MODIFY: "!",
    ChangeType.CONTEXT: " ",
}


class RenderError(Exception):
    """Raised when a renderer meets a change it cannot represent.

    This signals a programming error: the set of change types is closed.
    """

    pass


def change_prefix(change: Change) -> str:
    try:
        return _PREFIXES[change.type]
    except KeyError:
        raise RenderError(f"Unknown change type: {change.type!r}") from None


def hunk_header(hunk: Hunk) -> str:
    """Return the ``@@ -old_start,old_len +new_start,new_len @@`` line.

    ``old_len`` counts the changes that are not additions and ``new_len``
    those that are not deletions. An empty side reports the line before
    the hunk, as standard patch tools expect.
    """
    old_len = sum(1 for c in hunk.changes if c.type is not ChangeType.ADD)
    new_len = sum(1 for c in hunk.changes if c.type is not ChangeType.DELETE)
    old_start = hunk.start_line if old_len else hunk.start_line - 1
    new_start = hunk.modified_start if new_len else hunk.modified_start - 1
    return f"@@ -{old_start},{old_len} +{new_start},{new_len} @@"


def file_header(file_diff: FileDiff) -> Tuple[str, str]:
    return f"--- a/{file_diff.path}", f"+++ b/{file_diff.path}"


def hunk_lines(hunk: Hunk) -> Iterator[Tuple[Change, str]]:
    """Yield ``(change, prefixed line)`` pairs for a hunk.

    A change without trailing newline is followed by the
    ``\\ No newline at end of file`` marker, yielded with the same change.
    """
    for change in hunk.changes:
        yield change, f"{change_prefix(change)}{change.content}"
        if change.missing_newline:
            yield change, NO_NEWLINE_MARKER


def format_unified(file_diff: FileDiff) -> str:
    """Render one file diff as unified diff text."""
    if not file_diff.hunks:
        return ""
    output = list(file_header(file_diff))
    for hunk in file_diff.hunks:
        output.append(hunk_header(hunk))
        output.extend(line for _, line in hunk_lines(hunk))
    return "\n".join(output) + "\n"


def format_patch(file_diffs: Iterable[FileDiff]) -> str:
    """Concatenate the unified diffs of several files into one patch."""
    return "".join(format_unified(diff) for diff in file_diffs)
