"""Labels and result dataclass for strategy risk triage."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class AlertLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MarginType(StrEnum):
    """Qualitative margin treatment of a structure."""

    EXEMPT = "exempt"
    COLLATERAL = "variable/collateral-based"
    LOCKED_TO_MAX_LOSS = "locked to max loss"


class RiskProfile(StrEnum):
    PREMIUM_LIMITED = "loss limited to premium paid"
    UNBOUNDED = "unbounded"
    DEFINED = "defined/spread-locked"


@dataclass(frozen=True)
class RiskAssessment:
    """Estimated margin/risk profile of one strategy.

    `margin_value` is a currency estimate when one can be derived, otherwise
    a short label (e.g. "variable").
    """

    margin_type: MarginType
    margin_value: float | str
    risk_profile: RiskProfile
    alert_level: AlertLevel
    exceeds_risk_limit: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "marginType": self.margin_type.value,
            "marginValue": self.margin_value,
            "riskProfile": self.risk_profile.value,
            "alertLevel": self.alert_level.value,
            "exceedsRiskLimit": self.exceeds_risk_limit,
        }
