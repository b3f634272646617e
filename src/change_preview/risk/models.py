"""
Data models for risk assessment.

A :class:`RiskAssessment` aggregates independent :class:`RiskFactor`
signals. Its level is the highest factor severity.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional


class RiskLevel(str, enum.Enum):
    """Severity, totally ordered ``low < medium < high < critical``."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RANKS = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}


class RiskFactorType(str, enum.Enum):
    BREAKING_CHANGE = "breaking-change"
    SECURITY = "security"
    PERFORMANCE = "performance"
    COMPLEXITY = "complexity"
    DEPENDENCY = "dependency"


@dataclass(frozen=True)
class RiskFactor:
    """One heuristic signal contributing to the overall risk."""

    type: RiskFactorType
    severity: RiskLevel
    description: str
    mitigation: Optional[str] = None


@dataclass(frozen=True)
class RiskAssessment:
    """Overall risk of a batch of operations.

    Attributes
    ----------
    level : RiskLevel
        Highest severity among ``factors``; ``low`` when there are none.
    factors : List[RiskFactor]
        Triggered factors in rule order.
    recommendations : List[str]
        Mitigations of the factors, in factor order.
    requires_review : bool
        ``True`` unless the level is ``low``.
    """

    level: RiskLevel = RiskLevel.LOW
    factors: List[RiskFactor] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    requires_review: bool = False
