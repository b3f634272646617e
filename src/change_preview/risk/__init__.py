"""
Risk assessment for change_preview.

This package classifies a batch of file operations into a risk level
with itemised factors. See :mod:`change_preview.risk.assessor` for the
rules and :mod:`change_preview.risk.models` for the data model.
"""

from .assessor import DEFAULT_RULES, assess_risk, default_rules, is_critical_path  # noqa: F401
from .models import RiskAssessment, RiskFactor, RiskFactorType, RiskLevel  # noqa: F401
