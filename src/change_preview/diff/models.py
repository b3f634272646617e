"""
Data models for file operations and their diffs.

An :class:`Operation` is a proposed file mutation. Its diff is described
by a :class:`FileDiff` holding an ordered list of :class:`Hunk` objects,
each of which owns the :class:`Change` records it displays.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional


class OperationType(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    APPEND = "append"
    MOVE = "move"


class OperationError(Exception):
    """Raised when an operation record is malformed."""

    pass


@dataclass(frozen=True)
class OperationMetadata:
    """Optional descriptive data attached to an operation."""

    description: Optional[str] = None
    language: Optional[str] = None


@dataclass(frozen=True)
class Operation:
    """A proposed file mutation awaiting review.

    Attributes
    ----------
    id : str
        Identifier used to select the operation during review.
    type : OperationType
        Kind of mutation.
    target_path : str
        Path of the file the operation writes (or deletes).
    content : Optional[str]
        New content for create/update, appended text for append.
    source_path : Optional[str]
        Original location for a move.
    metadata : OperationMetadata
        Optional description and language hint.
    """

    id: str
    type: OperationType
    target_path: str
    content: Optional[str] = None
    source_path: Optional[str] = None
    metadata: OperationMetadata = field(default_factory=OperationMetadata)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Operation":
        """Build an operation from a JSON-style mapping.

        Both ``targetPath`` and ``target_path`` spellings are accepted
        (likewise for ``sourcePath``).

        Raises
        ------
        OperationError
            If a required key is missing or a value has the wrong type.
        """
        if not isinstance(data, Mapping):
            raise OperationError("Operation must be an object")

        op_id = data.get("id")
        if not isinstance(op_id, str) or not op_id:
            raise OperationError("Operation 'id' must be a non-empty string")

        try:
            op_type = OperationType(data.get("type"))
        except ValueError as exc:
            raise OperationError(
                f"Operation {op_id}: unknown type {data.get('type')!r}"
            ) from exc

        target = data.get("targetPath", data.get("target_path"))
        if not isinstance(target, str) or not target:
            raise OperationError(f"Operation {op_id}: 'targetPath' must be a non-empty string")

        content = data.get("content")
        if content is not None and not isinstance(content, str):
            raise OperationError(f"Operation {op_id}: 'content' must be a string")

        source = data.get("sourcePath", data.get("source_path"))
        if source is not None and not isinstance(source, str):
            raise OperationError(f"Operation {op_id}: 'sourcePath' must be a string")

        raw_meta = data.get("metadata") or {}
        if not isinstance(raw_meta, Mapping):
            raise OperationError(f"Operation {op_id}: 'metadata' must be an object")

        return cls(
            id=op_id,
            type=op_type,
            target_path=target,
            content=content,
            source_path=source,
            metadata=OperationMetadata(
                description=raw_meta.get("description"),
                language=raw_meta.get("language"),
            ),
        )


class SegmentKind(str, enum.Enum):
    EQUAL = "equal"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class ChangeSegment:
    """A run of lines reported by the line change source.

    ``lines`` keep their ``\\n`` terminators; only the final line of a
    text may lack one.
    """

    kind: SegmentKind
    lines: List[str]


class ChangeType(str, enum.Enum):
    CONTEXT = "context"
    ADD = "add"
    DELETE = "delete"
    MODIFY = "modify"


@dataclass(frozen=True)
class Change:
    """A single displayable line of a hunk."""

    type: ChangeType
    content: str
    original_line: Optional[int] = None
    modified_line: Optional[int] = None
    # True for the last line of a text that has no trailing newline
    missing_newline: bool = False

    @property
    def line_number(self) -> int:
        if self.type is ChangeType.ADD:
            return self.modified_line  # type: ignore[return-value]
        return self.original_line  # type: ignore[return-value]


@dataclass
class Hunk:
    """A contiguous window of changes.

    ``start_line`` and ``end_line`` use original-file numbering;
    ``modified_start`` is the first line of the window in the modified
    file. ``end_line`` is the nominal end including trailing context.
    """

    start_line: int
    end_line: int
    modified_start: int
    additions: int = 0
    deletions: int = 0
    changes: List[Change] = field(default_factory=list)


@dataclass(frozen=True)
class Stats:
    """Line statistics for a single file diff."""

    additions: int = 0
    deletions: int = 0
    modifications: int = 0
    total_changes: int = 0
    percentage_changed: int = 0


@dataclass(frozen=True)
class FileDiff:
    """The diff of one operation's target file."""

    path: str
    operation: Operation
    hunks: List[Hunk]
    language: Optional[str]
    original_content: str
    modified_content: str
    stats: Stats

