"""Rule-based margin/risk triage layered on top of strategy metrics.

This is an illustrative estimate meant for quick screening, not a broker or
regulatory margin calculation. Three outcomes exist:

1. No short legs: loss is capped at the premium paid, margin exempt.
2. Short legs and max loss is unbounded: collateral-based margin, high alert.
3. Short legs and a finite max loss: margin locked to that loss, medium alert.

Separately, `exceeds_risk_limit` flags a finite max loss larger than the
configured limit. It does not change the outcome above.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from options_payoff.options.metrics import Metrics, is_unbounded
from options_payoff.options.risk.types import (
    AlertLevel,
    MarginType,
    RiskAssessment,
    RiskProfile,
)
from options_payoff.options.types import OptionLeg

logger = logging.getLogger(__name__)

DEFAULT_RISK_LIMIT = 5_000.0


def _exceeds_limit(metrics: Metrics, risk_limit: float) -> bool:
    if is_unbounded(metrics.max_loss):
        return False
    return abs(metrics.max_loss) > risk_limit


def classify_risk(
    legs: Iterable[OptionLeg],
    metrics: Metrics,
    *,
    risk_limit: float = DEFAULT_RISK_LIMIT,
) -> RiskAssessment:
    """Map leg composition and metrics to exactly one of three risk outcomes."""
    if risk_limit < 0:
        raise ValueError("risk_limit must be >= 0")

    legs = tuple(legs)
    over_limit = _exceeds_limit(metrics, risk_limit)

    if not any(leg.is_short for leg in legs):
        assessment = RiskAssessment(
            margin_type=MarginType.EXEMPT,
            margin_value=max(metrics.cost, 0.0),
            risk_profile=RiskProfile.PREMIUM_LIMITED,
            alert_level=AlertLevel.LOW,
            exceeds_risk_limit=over_limit,
        )
    elif is_unbounded(metrics.max_loss):
        assessment = RiskAssessment(
            margin_type=MarginType.COLLATERAL,
            margin_value="variable",
            risk_profile=RiskProfile.UNBOUNDED,
            alert_level=AlertLevel.HIGH,
            exceeds_risk_limit=over_limit,
        )
    else:
        assessment = RiskAssessment(
            margin_type=MarginType.LOCKED_TO_MAX_LOSS,
            margin_value=abs(metrics.max_loss),
            risk_profile=RiskProfile.DEFINED,
            alert_level=AlertLevel.MEDIUM,
            exceeds_risk_limit=over_limit,
        )

    if over_limit:
        logger.warning(
            "Max loss %.2f exceeds risk limit %.2f", metrics.max_loss, risk_limit
        )
    return assessment
