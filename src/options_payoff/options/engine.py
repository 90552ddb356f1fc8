"""End-to-end evaluation: price window -> payoff curve -> metrics -> risk."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from numbers import Integral
from typing import Any

import pandas as pd

from .metrics import (
    BREAKEVEN_DECIMALS,
    DEFAULT_UNBOUNDED_THRESHOLD,
    BoundaryMethod,
    Metrics,
    compute_metrics,
    compute_metrics_analytic,
)
from .payoff import curve_frame, payoff_curve
from .risk import DEFAULT_RISK_LIMIT, RiskAssessment, classify_risk
from .types import PayoffPoint, PriceMarkers, PriceWindow, Strategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationConfig:
    """Sampling and classification settings for one evaluation.

    Attributes:
        lower_pct: Window lower bound as a fraction of the reference spot.
        upper_pct: Window upper bound as a fraction of the reference spot.
        samples: Number of evenly spaced prices, both ends included.
        unbounded_threshold: Magnitude above which a sampled extreme is
            reported as unbounded (sampled method only).
        risk_limit: Finite max loss above which the risk flag is raised.
        method: Sampled (grid) or analytic (piecewise-linear) boundaries.
    """

    lower_pct: float = 0.7
    upper_pct: float = 1.3
    samples: int = 101
    unbounded_threshold: float = DEFAULT_UNBOUNDED_THRESHOLD
    risk_limit: float = DEFAULT_RISK_LIMIT
    method: BoundaryMethod = BoundaryMethod.SAMPLED
    breakeven_decimals: int = BREAKEVEN_DECIMALS

    def __post_init__(self) -> None:
        if self.lower_pct < 0:
            raise ValueError("lower_pct must be >= 0")
        if self.upper_pct <= self.lower_pct:
            raise ValueError("upper_pct must be > lower_pct")
        if isinstance(self.samples, bool) or not isinstance(self.samples, Integral):
            raise ValueError(f"samples must be an integer (got {self.samples!r})")
        if self.samples < 2:
            raise ValueError("samples must be >= 2")
        if not math.isfinite(self.unbounded_threshold) or self.unbounded_threshold <= 0:
            raise ValueError("unbounded_threshold must be > 0")
        if self.risk_limit < 0:
            raise ValueError("risk_limit must be >= 0")
        if self.breakeven_decimals < 0:
            raise ValueError("breakeven_decimals must be >= 0")
        object.__setattr__(self, "method", BoundaryMethod(self.method))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> EvaluationConfig:
        """Build from a config section, ignoring unset (`None`) keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown evaluation config keys: {unknown}")
        return cls(**{k: v for k, v in data.items() if v is not None})

    def window(self, reference_spot: float) -> PriceWindow:
        return PriceWindow.around(
            reference_spot,
            lower_pct=self.lower_pct,
            upper_pct=self.upper_pct,
            samples=self.samples,
        )


@dataclass(frozen=True)
class StrategyEvaluation:
    """Curve, metrics and risk triage of one strategy at one reference spot."""

    strategy: Strategy
    reference_spot: float
    window: PriceWindow
    points: tuple[PayoffPoint, ...]
    metrics: Metrics
    risk: RiskAssessment

    def frame(self) -> pd.DataFrame:
        return curve_frame(self.points)

    def markers(self) -> PriceMarkers:
        """Reference spot and breakeven lines for the chart."""
        return PriceMarkers(
            reference_spot=self.reference_spot,
            breakevens=self.metrics.breakevens,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategyName": self.strategy.name,
            "referenceSpot": self.reference_spot,
            "window": {
                "lower": self.window.lower,
                "upper": self.window.upper,
                "samples": self.window.samples,
            },
            "legs": [leg.to_dict() for leg in self.strategy.legs],
            "metrics": self.metrics.to_dict(),
            "risk": self.risk.to_dict(),
            "markers": self.markers().to_dict(),
        }


def evaluate_strategy(
    strategy: Strategy,
    reference_spot: float,
    config: EvaluationConfig | None = None,
) -> StrategyEvaluation:
    """Run the full pipeline for one strategy."""
    config = config or EvaluationConfig()
    window = config.window(reference_spot)
    points = payoff_curve(strategy.legs, window)

    if config.method == BoundaryMethod.ANALYTIC:
        metrics = compute_metrics_analytic(
            strategy.legs, window, decimals=config.breakeven_decimals
        )
    else:
        metrics = compute_metrics(
            strategy.legs,
            points,
            threshold=config.unbounded_threshold,
            decimals=config.breakeven_decimals,
        )

    risk = classify_risk(strategy.legs, metrics, risk_limit=config.risk_limit)

    logger.debug(
        "Evaluated strategy=%r legs=%d spot=%.2f method=%s cost=%.2f "
        "max_profit=%s max_loss=%s breakevens=%s alert=%s",
        strategy.name,
        len(strategy),
        reference_spot,
        metrics.method,
        metrics.cost,
        metrics.max_profit,
        metrics.max_loss,
        list(metrics.breakevens),
        risk.alert_level,
    )
    return StrategyEvaluation(
        strategy=strategy,
        reference_spot=float(reference_spot),
        window=window,
        points=points,
        metrics=metrics,
        risk=risk,
    )


def evaluate_many(
    strategies: Iterable[Strategy],
    reference_spot: float,
    config: EvaluationConfig | None = None,
) -> list[StrategyEvaluation]:
    """Evaluate independent strategies; output order follows input order."""
    config = config or EvaluationConfig()
    return [evaluate_strategy(s, reference_spot, config) for s in strategies]
