"""Option legs, expiration payoff curves, metrics and risk triage."""

from .engine import (
    EvaluationConfig,
    StrategyEvaluation,
    evaluate_many,
    evaluate_strategy,
)
from .errors import LegValidationError, PayoffError, PriceRangeError
from .metrics import (
    BREAKEVEN_DECIMALS,
    DEFAULT_UNBOUNDED_THRESHOLD,
    UNBOUNDED,
    BoundaryMethod,
    Metrics,
    compute_metrics,
    compute_metrics_analytic,
    exact_breakevens,
    find_breakevens,
    is_unbounded,
    net_cost,
    tail_slopes,
)
from .payoff import curve_frame, intrinsic_value, leg_pnl, payoff_at, payoff_curve
from .risk import (
    DEFAULT_RISK_LIMIT,
    AlertLevel,
    MarginType,
    RiskAssessment,
    RiskProfile,
    classify_risk,
)
from .types import (
    LegAction,
    OptionLeg,
    OptionType,
    PayoffPoint,
    PriceMarkers,
    PriceWindow,
    Strategy,
)

__all__ = [
    "OptionType",
    "LegAction",
    "OptionLeg",
    "Strategy",
    "PayoffPoint",
    "PriceWindow",
    "PriceMarkers",
    "PayoffError",
    "LegValidationError",
    "PriceRangeError",
    "intrinsic_value",
    "leg_pnl",
    "payoff_at",
    "payoff_curve",
    "curve_frame",
    "UNBOUNDED",
    "DEFAULT_UNBOUNDED_THRESHOLD",
    "BREAKEVEN_DECIMALS",
    "BoundaryMethod",
    "Metrics",
    "is_unbounded",
    "net_cost",
    "find_breakevens",
    "compute_metrics",
    "tail_slopes",
    "exact_breakevens",
    "compute_metrics_analytic",
    "AlertLevel",
    "MarginType",
    "RiskProfile",
    "RiskAssessment",
    "DEFAULT_RISK_LIMIT",
    "classify_risk",
    "EvaluationConfig",
    "StrategyEvaluation",
    "evaluate_strategy",
    "evaluate_many",
]
