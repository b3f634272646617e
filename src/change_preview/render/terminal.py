"""
Terminal rendering.

:func:`format_terminal` colours a unified diff with ANSI escapes produced
by :func:`click.style`; :func:`format_summary` renders the plain-text
overview of a whole preview.
"""

from __future__ import annotations

from typing import List

import click

from change_preview.diff.models import ChangeType, FileDiff, OperationType
from change_preview.preview.models import Preview
from change_preview.render.unified import NO_NEWLINE_MARKER, file_header, hunk_header, hunk_lines
from change_preview.risk.models import RiskLevel

_COLOURS = {
    ChangeType.ADD: "green",
    ChangeType.DELETE: "red",
    ChangeType.MODIFY: "yellow",
    ChangeType.CONTEXT: "bright_black",
}

_OPERATION_ICONS = {
    OperationType.CREATE: "✨",
    OperationType.UPDATE: "📝",
    OperationType.DELETE: "🗑️",
    OperationType.MOVE: "📦",
    OperationType.APPEND: "➕",
}

_RISK_LABELS = {
    RiskLevel.LOW: "🟢 Low",
    RiskLevel.MEDIUM: "🟡 Medium",
    RiskLevel.HIGH: "🔴 High",
    RiskLevel.CRITICAL: "⛔ Critical",
}

_RULE = "═" * 51
_THIN_RULE = "─" * 51


def format_terminal(file_diff: FileDiff) -> str:
    """Render one file diff with ANSI colours."""
    if not file_diff.hunks:
        return ""
    output = [click.style(line, fg="cyan") for line in file_header(file_diff)]
    for hunk in file_diff.hunks:
        output.append(click.style(hunk_header(hunk), fg="blue"))
        for change, text in hunk_lines(hunk):
            if text == NO_NEWLINE_MARKER:
                output.append(text)
            else:
                output.append(click.style(text, fg=_COLOURS[change.type]))
    return "\n".join(output) + "\n"


def format_number(value: int) -> str:
    return f"{value:,}"


def format_net_change(value: int) -> str:
    if value > 0:
        return f"+{format_number(value)}"
    return format_number(value)


def format_summary(preview: Preview) -> str:
    """Render the plain-text change summary of a preview."""
    summary = preview.summary
    out: List[str] = [
        _RULE,
        "CHANGE SUMMARY".center(51).rstrip(),
        _RULE,
        "",
        "📊 Overview:",
        f"   Total files affected: {summary.total_files}",
        f"   Files created: {summary.files_created}",
        f"   Files modified: {summary.files_modified}",
        f"   Files deleted: {summary.files_deleted}",
        f"   Files moved: {summary.files_moved}",
        "",
        "📈 Statistics:",
        f"   Lines added: {format_number(summary.total_additions)} +++",
        f"   Lines deleted: {format_number(summary.total_deletions)} ---",
        f"   Net change: {format_net_change(summary.total_additions - summary.total_deletions)}",
        "",
        "⚠️  Risk Assessment:",
        f"   Risk level: {_RISK_LABELS[summary.risk_level]}",
        f"   Estimated review time: {summary.estimated_review_time} minutes",
    ]
    for factor in preview.risk.factors:
        out.append(f"   • [{factor.severity.value}] {factor.description}")
    out.extend(["", "📁 File Changes:", _THIN_RULE])

    for file_diff in preview.file_operations:
        stats = file_diff.stats
        out.append(f"{_OPERATION_ICONS[file_diff.operation.type]} {file_diff.path}")
        out.append(f"   {stats.additions}+ {stats.deletions}- ({stats.percentage_changed}% changed)")
        if file_diff.operation.metadata.description:
            out.append(f"   📝 {file_diff.operation.metadata.description}")
        out.append("")

    if preview.metadata.warnings:
        out.append("⚠️  Warnings:")
        out.extend(f"   • {warning}" for warning in preview.metadata.warnings)
        out.append("")

    if preview.metadata.suggestions:
        out.append("💡 Suggestions:")
        out.extend(f"   • {suggestion}" for suggestion in preview.metadata.suggestions)
        out.append("")

    out.append(_RULE)
    out.append(f"Generated: {preview.metadata.generated_at.isoformat(timespec='seconds')}")
    out.append(f"By: {preview.metadata.generated_by}")
    return "\n".join(out) + "\n"
