"""
Messages accepted by a review session.

Front ends (a webview, an editor extension) send loosely typed JSON
payloads. :func:`parse_message` turns them into one of a closed set of
message types at the boundary so the session never handles open
payloads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union


class ReviewError(Exception):
    """Raised on an invalid review message or state transition."""

    pass


@dataclass(frozen=True)
class ShowFile:
    path: str


@dataclass(frozen=True)
class ApplyChanges:
    selected_files: Tuple[str, ...]


@dataclass(frozen=True)
class ExportDiff:
    output_path: Optional[str] = None


ReviewMessage = Union[ShowFile, ApplyChanges, ExportDiff]


def parse_message(payload: Mapping[str, Any]) -> ReviewMessage:
    """Convert a ``{"command": ...}`` payload into a review message.

    Raises
    ------
    ReviewError
        For an unknown command or missing/invalid fields.
    """
    if not isinstance(payload, Mapping):
        raise ReviewError("Review message must be an object")

    command = payload.get("command")
    if command == "showFile":
        path = payload.get("path")
        if not isinstance(path, str) or not path:
            raise ReviewError("showFile requires a 'path'")
        return ShowFile(path=path)

    if command == "applyChanges":
        selected = payload.get("selectedFiles")
        if not isinstance(selected, list) or not all(isinstance(p, str) for p in selected):
            raise ReviewError("applyChanges requires a 'selectedFiles' list")
        return ApplyChanges(selected_files=tuple(selected))

    if command == "exportDiff":
        output_path = payload.get("outputPath")
        if output_path is not None and not isinstance(output_path, str):
            raise ReviewError("exportDiff 'outputPath' must be a string")
        return ExportDiff(output_path=output_path)

    raise ReviewError(f"Unknown review command: {command!r}")
