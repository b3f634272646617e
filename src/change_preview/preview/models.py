"""Data models for a multi-file change preview."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from change_preview.diff.models import FileDiff
from change_preview.risk.models import RiskAssessment, RiskLevel


@dataclass(frozen=True)
class Summary:
    """Roll-up of every file in a preview.

    ``estimated_review_time`` is in minutes.
    """

    total_files: int = 0
    files_created: int = 0
    files_modified: int = 0
    files_deleted: int = 0
    files_moved: int = 0
    total_additions: int = 0
    total_deletions: int = 0
    risk_level: RiskLevel = RiskLevel.LOW
    estimated_review_time: int = 0


@dataclass(frozen=True)
class PreviewMetadata:
    generated_at: datetime
    generated_by: str
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Preview:
    """All file diffs of a batch with their summary and risk."""

    file_operations: List[FileDiff]
    summary: Summary
    metadata: PreviewMetadata
    risk: RiskAssessment
