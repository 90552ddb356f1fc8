"""Margin/risk triage for option strategies."""

from .classifier import DEFAULT_RISK_LIMIT, classify_risk
from .types import AlertLevel, MarginType, RiskAssessment, RiskProfile

__all__ = [
    "AlertLevel",
    "MarginType",
    "RiskProfile",
    "RiskAssessment",
    "DEFAULT_RISK_LIMIT",
    "classify_risk",
]
