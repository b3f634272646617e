"""
Renderers for change_preview.

Every renderer is a pure function of a :class:`FileDiff` (or a whole
:class:`Preview` for the summary). :func:`render_text` dispatches on a
:class:`DiffFormat` and returns printable text, laying the structured
views out as columns.
"""

from __future__ import annotations

from change_preview.config.options import DiffFormat
from change_preview.diff.models import FileDiff

from .markup import escape_html, format_html, format_markdown
from .terminal import format_summary, format_terminal
from .unified import RenderError, format_patch, format_unified, hunk_header
from .views import (
    InlineLine,
    InlineView,
    SideBySideView,
    SideContent,
    SideLine,
    format_inline,
    format_side_by_side,
    inline_to_text,
    side_by_side_to_text,
)

__all__ = [
    "RenderError", "render_text", "hunk_header",
    "format_unified", "format_patch", "format_html", "format_markdown",
    "format_terminal", "format_summary", "escape_html",
    "format_side_by_side", "format_inline", "side_by_side_to_text", "inline_to_text",
    "SideBySideView", "SideContent", "SideLine", "InlineView", "InlineLine",
]


def render_text(file_diff: FileDiff, fmt: DiffFormat) -> str:
    """Render ``file_diff`` in ``fmt`` as text."""
    if fmt is DiffFormat.UNIFIED:
        return format_unified(file_diff)
    if fmt is DiffFormat.SIDE_BY_SIDE:
        return side_by_side_to_text(format_side_by_side(file_diff))
    if fmt is DiffFormat.INLINE:
        return inline_to_text(format_inline(file_diff))
    if fmt is DiffFormat.HTML:
        return format_html(file_diff)
    if fmt is DiffFormat.MARKDOWN:
        return format_markdown(file_diff)
    if fmt is DiffFormat.TERMINAL:
        return format_terminal(file_diff)
    raise RenderError(f"Unknown diff format: {fmt!r}")
