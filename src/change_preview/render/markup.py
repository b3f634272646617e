"""
HTML and Markdown rendering.

HTML output escapes the five HTML special characters in every piece of
file-derived text. Markdown output wraps the hunks in a ``diff`` code
fence.
"""

from __future__ import annotations

from typing import List

from change_preview.diff.models import ChangeType, FileDiff
from change_preview.render.unified import RenderError, change_prefix, hunk_header, hunk_lines

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}

_HTML_CLASSES = {
    ChangeType.ADD: "addition",
    ChangeType.DELETE: "deletion",
    ChangeType.MODIFY: "modification",
    ChangeType.CONTEXT: "context",
}

_STYLE = """\
body { font-family: monospace; margin: 0; padding: 20px; }
.diff { border: 1px solid #ddd; border-radius: 4px; }
.hunk-header { background: #f6f8fa; padding: 10px; color: #586069; }
.line { padding: 0 10px; white-space: pre; }
.line-number { display: inline-block; width: 50px; color: #999; text-align: right; margin-right: 10px; }
.addition { background: #e6ffed; }
.deletion { background: #ffeef0; }
.modification { background: #fff5b1; }
.context { color: #586069; }"""


def escape_html(text: str) -> str:
    return "".join(_HTML_ESCAPES.get(char, char) for char in text)


def format_html(file_diff: FileDiff) -> str:
    """Render a file diff as a standalone HTML document."""
    parts: List[str] = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="UTF-8">',
        f"<title>{escape_html(file_diff.path)}</title>",
        f"<style>\n{_STYLE}\n</style>",
        "</head>",
        "<body>",
        '<div class="diff">',
        f"<h3>{escape_html(file_diff.path)}</h3>",
    ]
    for hunk in file_diff.hunks:
        parts.append('<div class="hunk">')
        parts.append(f'<div class="hunk-header">{escape_html(hunk_header(hunk))}</div>')
        for change in hunk.changes:
            try:
                css_class = _HTML_CLASSES[change.type]
            except KeyError:
                raise RenderError(f"Unknown change type: {change.type!r}") from None
            parts.append(
                f'<div class="line {css_class}">'
                f'<span class="line-number">{change.line_number}</span>'
                f"{escape_html(change_prefix(change) + change.content)}"
                "</div>"
            )
        parts.append("</div>")
    parts.extend(["</div>", "</body>", "</html>"])
    return "\n".join(parts) + "\n"


def format_markdown(file_diff: FileDiff) -> str:
    """Render a file diff as a Markdown section."""
    stats = file_diff.stats
    lines = [
        f"## {file_diff.path}",
        "",
        f"**Changes:** {stats.additions} additions, {stats.deletions} deletions",
        "",
        "```diff",
    ]
    for hunk in file_diff.hunks:
        lines.append(hunk_header(hunk))
        lines.extend(text for _, text in hunk_lines(hunk))
    lines.extend(["```", ""])
    return "\n".join(lines) + "\n"
