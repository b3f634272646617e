"""
Preview assembly.

The :class:`PreviewAssembler` builds one :class:`FileDiff` per operation,
rolls them up into a :class:`Summary`, assesses the risk of the whole
batch and collects warnings and suggestions. Building a file diff is
independent of every other file, so the per-file work may run on a
thread pool; results always keep the input order.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from change_preview.config.loader import ConfigError
from change_preview.config.options import DiffOptions
from change_preview.diff.hunk_builder import build_hunks
from change_preview.diff.language import detect_language
from change_preview.diff.models import FileDiff, Operation, OperationType
from change_preview.diff.stats import calculate_stats
from change_preview.preview.models import Preview, PreviewMetadata, Summary
from change_preview.preview.observer import LoggingObserver, PreviewObserver
from change_preview.preview.workspace import ContentReader, WorkspaceReader
from change_preview.risk.assessor import assess_risk, default_rules
from change_preview.risk.models import RiskLevel


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


GENERATED_BY = "change-preview"

LARGE_FILE_CHARS = 100_000
BATCH_SIZE_HINT = 5

# Operation kinds whose target already exists and must be read.
_READS_TARGET = {OperationType.UPDATE, OperationType.DELETE, OperationType.APPEND}

PreviewCheck = Callable[[Sequence[Operation]], Optional[str]]


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Warnings and suggestions
# ---------------------------------------------------------------------------

def deletion_warning(operations: Sequence[Operation]) -> Optional[str]:
    count = sum(1 for op in operations if op.type is OperationType.DELETE)
    if not count:
        return None
    return f"{_plural(count, 'file')} will be deleted"


def large_file_warning(operations: Sequence[Operation]) -> Optional[str]:
    count = sum(1 for op in operations if op.content and len(op.content) > LARGE_FILE_CHARS)
    if not count:
        return None
    return f"{_plural(count, 'large file operation')} detected"


def is_test_path(path: str) -> bool:
    posix = PurePosixPath(path.replace("\\", "/"))
    return (
        ".test." in posix.name
        or ".spec." in posix.name
        or posix.name.startswith("test_")
        or "tests" in posix.parts[:-1]
    )


def testing_suggestion(operations: Sequence[Operation]) -> Optional[str]:
    if any(is_test_path(op.target_path) for op in operations):
        return "Run tests after applying changes"
    return None


def batch_size_suggestion(operations: Sequence[Operation]) -> Optional[str]:
    if len(operations) > BATCH_SIZE_HINT:
        return "Consider committing changes in smaller batches"
    return None


WARNING_CHECKS: List[PreviewCheck] = [deletion_warning, large_file_warning]
SUGGESTION_CHECKS: List[PreviewCheck] = [testing_suggestion, batch_size_suggestion]


def _run_checks(checks: Iterable[PreviewCheck], operations: Sequence[Operation]) -> List[str]:
    messages = []
    for check in checks:
        message = check(operations)
        if message:
            messages.append(message)
    return messages


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------

class PreviewAssembler:
    """Generate change previews for batches of operations.

    Parameters
    ----------
    reader : ContentReader, optional
        Source of original file contents; a :class:`WorkspaceReader` on
        the working directory by default.
    options : DiffOptions, optional
        Validated on construction.
    observer : PreviewObserver, optional
        Receives progress and per-file warnings.
    max_workers : int
        Worker threads for the per-file map; ``1`` runs sequentially.
    clock : callable
        Returns the generation timestamp.
    critical_files : iterable of str
        Extra critical file names for the risk assessment.

    Raises
    ------
    ConfigError
        If the options or ``max_workers`` are invalid.
    """

    def __init__(
        self,
        reader: Optional[ContentReader] = None,
        options: Optional[DiffOptions] = None,
        observer: Optional[PreviewObserver] = None,
        max_workers: int = 1,
        clock: Callable[[], datetime] = _utcnow,
        critical_files: Iterable[str] = (),
    ) -> None:
        self.reader = reader if reader is not None else WorkspaceReader()
        self.options = (options or DiffOptions()).validate()
        self.observer = observer if observer is not None else LoggingObserver()
        if not isinstance(max_workers, int) or max_workers < 1:
            raise ConfigError("max_workers must be a positive integer")
        self.max_workers = max_workers
        self.clock = clock
        self.risk_rules = default_rules(critical_files)

    # ------------------------------------------------------------------
    # Single file
    # ------------------------------------------------------------------
    def _read_original(self, path: str) -> Optional[str]:
        """Return the decoded file, or ``None`` if it does not exist."""
        try:
            raw = self.reader.read(path)
        except FileNotFoundError:
            logger.debug("Original file not found: %s", path)
            return None
        return raw.decode("utf-8")

    def _contents(self, operation: Operation) -> Tuple[str, str]:
        """Return the (original, modified) texts for ``operation``."""
        modified = operation.content or ""

        if operation.type is OperationType.MOVE:
            original = self._read_original(operation.source_path or operation.target_path)
            if original is None:
                return "", modified
            return original, operation.content if operation.content is not None else original

        if operation.type not in _READS_TARGET:
            return "", modified

        original = self._read_original(operation.target_path)
        if original is None:
            return "", modified
        if operation.type is OperationType.APPEND:
            modified = original + "\n" + (operation.content or "")
        elif operation.type is OperationType.DELETE:
            modified = ""
        return original, modified

    def create_file_diff(self, operation: Operation) -> FileDiff:
        """Build the diff of a single operation.

        Raises
        ------
        OSError
            If the original file exists but cannot be read.
        UnicodeDecodeError
            If the original file is not valid UTF-8.
        """
        original, modified = self._contents(operation)
        hunks = build_hunks(
            original,
            modified,
            context_lines=self.options.context_lines,
            ignore_whitespace=self.options.ignore_whitespace,
        )
        return FileDiff(
            path=operation.target_path,
            operation=operation,
            hunks=hunks,
            language=operation.metadata.language or detect_language(operation.target_path),
            original_content=original,
            modified_content=modified,
            stats=calculate_stats(hunks),
        )

    def _try_file_diff(self, operation: Operation) -> Optional[FileDiff]:
        try:
            return self.create_file_diff(operation)
        except (OSError, ValueError) as exc:
            # UnicodeDecodeError is a ValueError
            self.observer.on_warn(f"Failed to create diff for {operation.target_path}: {exc}")
            return None

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------
    def generate_preview(self, operations: Sequence[Operation]) -> Preview:
        """Generate the preview of a batch of operations."""
        self.observer.on_info(f"Generating diff preview for {_plural(len(operations), 'operation')}")

        if self.max_workers > 1 and len(operations) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(self._try_file_diff, operations))
        else:
            results = [self._try_file_diff(op) for op in operations]
        file_diffs = [diff for diff in results if diff is not None]

        risk = assess_risk(operations, self.risk_rules)
        summary = self.create_summary(file_diffs, operations, risk.level)
        metadata = PreviewMetadata(
            generated_at=self.clock(),
            generated_by=GENERATED_BY,
            warnings=_run_checks(WARNING_CHECKS, operations),
            suggestions=_run_checks(SUGGESTION_CHECKS, operations),
        )
        logger.debug(
            "Preview: %d file(s), +%d -%d, risk %s",
            summary.total_files,
            summary.total_additions,
            summary.total_deletions,
            summary.risk_level.value,
        )
        return Preview(file_operations=file_diffs, summary=summary, metadata=metadata, risk=risk)

    @staticmethod
    def create_summary(file_diffs: Sequence[FileDiff], operations: Sequence[Operation], risk_level: RiskLevel) -> Summary:
        """Roll up file diffs; file counts come from the operation kinds."""

        def count(*types: OperationType) -> int:
            return sum(1 for op in operations if op.type in types)

        additions = sum(diff.stats.additions for diff in file_diffs)
        deletions = sum(diff.stats.deletions for diff in file_diffs)
        return Summary(
            total_files=len(file_diffs),
            files_created=count(OperationType.CREATE),
            files_modified=count(OperationType.UPDATE, OperationType.APPEND),
            files_deleted=count(OperationType.DELETE),
            files_moved=count(OperationType.MOVE),
            total_additions=additions,
            total_deletions=deletions,
            risk_level=risk_level,
            estimated_review_time=estimate_review_minutes(additions + deletions),
        )


def estimate_review_minutes(changed_lines: int) -> int:
    """Thirty seconds per ten changed lines, rounded up."""
    return math.ceil(changed_lines / 10 * 0.5)


def generate_preview(
    operations: Sequence[Operation],
    options: Optional[DiffOptions] = None,
    reader: Optional[ContentReader] = None,
) -> Preview:
    """Convenience wrapper around :class:`PreviewAssembler`."""
    return PreviewAssembler(reader=reader, options=options).generate_preview(operations)
