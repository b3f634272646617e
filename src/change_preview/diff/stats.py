"""
Statistics for a single file diff.

The statistics are a function of hunk shape only; the file contents are
never consulted.
"""

from __future__ import annotations

import math
from typing import Iterable

from change_preview.diff.models import Hunk, Stats

# Smoothing constant of the bounded change score. Tunable heuristic.
PERCENT_SMOOTHING = 100


def percentage_changed(total_changes: int, smoothing: int = PERCENT_SMOOTHING) -> int:
    """Return the bounded change score in ``[0, 100]``.

    ``100 * total / (total + smoothing)`` rounded half up, so a one-line
    change never reads as 0% and very large diffs approach 100%.
    """
    if total_changes <= 0:
        return 0
    return int(math.floor(100 * total_changes / (total_changes + smoothing) + 0.5))


def calculate_stats(hunks: Iterable[Hunk]) -> Stats:
    """Reduce hunks to additive counters.

    A balanced add/delete pair inside one hunk counts as a modification,
    hence ``modifications`` sums ``min(additions, deletions)`` per hunk.
    """
    additions = 0
    deletions = 0
    modifications = 0
    for hunk in hunks:
        additions += hunk.additions
        deletions += hunk.deletions
        modifications += min(hunk.additions, hunk.deletions)

    total = additions + deletions
    return Stats(
        additions=additions,
        deletions=deletions,
        modifications=modifications,
        total_changes=total,
        percentage_changed=percentage_changed(total),
    )
