"""
Diff construction for change_preview.

This package turns two versions of a text into hunks and statistics.
See :mod:`change_preview.diff.hunk_builder` for the windowing algorithm
and :mod:`change_preview.diff.models` for the data model.
"""

from .hunk_builder import HUNK_MERGE_THRESHOLD, HunkBuilder, build_hunks  # noqa: F401
from .language import detect_language  # noqa: F401
from .line_changes import line_changes, split_lines  # noqa: F401
from .models import (  # noqa: F401
    Change,
    ChangeSegment,
    ChangeType,
    FileDiff,
    Hunk,
    Operation,
    OperationError,
    OperationMetadata,
    OperationType,
    SegmentKind,
    Stats,
)
from .stats import PERCENT_SMOOTHING, calculate_stats, percentage_changed  # noqa: F401
