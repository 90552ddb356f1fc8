"""Screen the whole strategy catalog at one spot.

This script demonstrates the library API end to end:
1) generate every catalog template around a reference spot,
2) evaluate each one (sampled or analytic boundaries),
3) collect cost, extrema, breakevens and risk triage into a DataFrame,
4) print it sorted by category and optionally write it to CSV.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass

import pandas as pd

from options_payoff.options import (
    BoundaryMethod,
    EvaluationConfig,
    StrategyEvaluation,
    evaluate_many,
    is_unbounded,
)
from options_payoff.strategies import CATALOG, list_templates


@dataclass(frozen=True)
class ExampleConfig:
    """Runtime configuration for the catalog screen."""

    spot: float
    method: BoundaryMethod
    category: str | None
    csv: str | None


def _parse_args() -> ExampleConfig:
    parser = argparse.ArgumentParser(description="Screen all catalog strategies.")
    parser.add_argument("--spot", type=float, default=100.0, help="Reference spot.")
    parser.add_argument(
        "--method",
        choices=[m.value for m in BoundaryMethod],
        default=BoundaryMethod.ANALYTIC.value,
        help="Boundary detection method.",
    )
    parser.add_argument("--category", default=None, help="Only this category.")
    parser.add_argument("--csv", default=None, help="Optional CSV output path.")
    args = parser.parse_args()

    return ExampleConfig(
        spot=float(args.spot),
        method=BoundaryMethod(args.method),
        category=args.category,
        csv=args.csv,
    )


def _bound(value, unbounded: float) -> float:
    return unbounded if is_unbounded(value) else float(value)


def _row(category: str, evaluation: StrategyEvaluation) -> dict[str, object]:
    metrics = evaluation.metrics
    return {
        "category": category,
        "strategy": evaluation.strategy.name,
        "legs": len(evaluation.strategy),
        "cost": metrics.cost,
        "max_profit": _bound(metrics.max_profit, float("inf")),
        "max_loss": _bound(metrics.max_loss, float("-inf")),
        "breakevens": " / ".join(f"{b:.2f}" for b in metrics.breakevens),
        "alert": evaluation.risk.alert_level.value,
        "over_limit": evaluation.risk.exceeds_risk_limit,
    }


def main() -> None:
    cfg = _parse_args()

    templates = list_templates(cfg.category) if cfg.category else CATALOG
    config = EvaluationConfig(method=cfg.method)
    evaluations = evaluate_many(
        (t.generate(cfg.spot) for t in templates), cfg.spot, config
    )

    frame = pd.DataFrame(
        [_row(t.category.value, e) for t, e in zip(templates, evaluations)]
    ).sort_values(["category", "strategy"], kind="stable")

    with pd.option_context("display.width", 200, "display.max_rows", 100):
        print(frame.to_string(index=False))

    if cfg.csv:
        frame.to_csv(cfg.csv, index=False)
        print(f"Wrote {len(frame)} rows to {cfg.csv}")


if __name__ == "__main__":
    main()
