"""
Heuristics for assessing the risk of a batch of file operations.

Each rule is an independent predicate over the whole operation list that
contributes at most one :class:`RiskFactor`. Rules never see or modify
the factors produced by other rules, so new rules can be added without
touching the existing ones. The rules are intentionally simple and
deterministic so that they can be unit tested in isolation.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Callable, Iterable, List, Optional, Sequence

from change_preview.diff.models import Operation, OperationType
from change_preview.risk.models import RiskAssessment, RiskFactor, RiskFactorType, RiskLevel


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


RiskRule = Callable[[Sequence[Operation]], Optional[RiskFactor]]

# Dependency manifests, build/type configuration and secrets.
CRITICAL_FILES = frozenset({
    "package.json",
    "package-lock.json",
    "tsconfig.json",
    "pyproject.toml",
    "setup.py",
    "setup.cfg",
    "requirements.txt",
    "Pipfile",
    "poetry.lock",
})

LARGE_CONTENT_LINES = 100


def is_critical_path(path: str, extra_markers: Iterable[str] = ()) -> bool:
    """Return True if ``path`` names a critical configuration file.

    Any ``.env`` file (``.env``, ``.env.local``...) counts as critical.
    """
    name = PurePosixPath(path.replace("\\", "/")).name
    if name == ".env" or name.startswith(".env."):
        return True
    return name in CRITICAL_FILES or name in set(extra_markers)


def critical_file_rule(extra_markers: Iterable[str] = ()) -> RiskRule:
    """Build the critical-file rule, optionally with extra file names."""
    markers = tuple(extra_markers)

    def rule(operations: Sequence[Operation]) -> Optional[RiskFactor]:
        critical = [op for op in operations if is_critical_path(op.target_path, markers)]
        if not critical:
            return None
        logger.debug("Critical files touched: %s", [op.target_path for op in critical])
        return RiskFactor(
            type=RiskFactorType.BREAKING_CHANGE,
            severity=RiskLevel.HIGH,
            description="Modifying critical configuration files",
            mitigation="Review changes carefully and test thoroughly",
        )

    return rule


def deletion_rule(operations: Sequence[Operation]) -> Optional[RiskFactor]:
    deletions = [op for op in operations if op.type is OperationType.DELETE]
    if not deletions:
        return None
    count = len(deletions)
    return RiskFactor(
        type=RiskFactorType.BREAKING_CHANGE,
        severity=RiskLevel.MEDIUM,
        description=f"Deleting {count} file{'s' if count != 1 else ''}",
        mitigation="Ensure files are not needed elsewhere",
    )


def large_change_rule(operations: Sequence[Operation]) -> Optional[RiskFactor]:
    large = [
        op for op in operations
        if op.content and len(op.content.split("\n")) > LARGE_CONTENT_LINES
    ]
    if not large:
        return None
    return RiskFactor(
        type=RiskFactorType.COMPLEXITY,
        severity=RiskLevel.MEDIUM,
        description="Large code changes detected",
        mitigation="Consider breaking into smaller changes",
    )


DEFAULT_RULES: List[RiskRule] = [critical_file_rule(), deletion_rule, large_change_rule]


def default_rules(critical_files: Iterable[str] = ()) -> List[RiskRule]:
    """Return the built-in rules, extending the critical-file markers."""
    return [critical_file_rule(critical_files), deletion_rule, large_change_rule]


def assess_risk(
    operations: Sequence[Operation],
    rules: Optional[Sequence[RiskRule]] = None,
) -> RiskAssessment:
    """Assess the risk of applying ``operations``.

    Parameters
    ----------
    operations : Sequence[Operation]
        The whole batch of proposed operations.
    rules : Optional[Sequence[RiskRule]]
        Rules to evaluate; :data:`DEFAULT_RULES` when omitted.

    Returns
    -------
    RiskAssessment
        Level is the maximum severity of the triggered factors, ``low``
        when none trigger.
    """
    active = DEFAULT_RULES if rules is None else rules
    factors: List[RiskFactor] = []
    for rule in active:
        factor = rule(operations)
        if factor is not None:
            factors.append(factor)

    level = max((f.severity for f in factors), default=RiskLevel.LOW)
    logger.debug("Risk level %s from %d factor(s)", level.value, len(factors))
    return RiskAssessment(
        level=level,
        factors=factors,
        recommendations=[f.mitigation for f in factors if f.mitigation],
        requires_review=level is not RiskLevel.LOW,
    )
