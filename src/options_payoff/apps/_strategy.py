"""Strategy/evaluation selection shared by the app entrypoints.

A strategy comes either from explicit `legs` in the config (YAML list of
mappings with `type`, `action`, `strike`, `quantity`, `price`) or from a
catalog `template` generated at `spot`.
"""

from __future__ import annotations

import argparse
from collections.abc import Mapping
from typing import Any

from options_payoff.options import BoundaryMethod, EvaluationConfig, Strategy
from options_payoff.strategies import get_template

DEFAULT_STRATEGY_CONFIG: dict[str, Any] = {
    "spot": 100.0,
    "template": "Long Call",
    "strategy_name": None,
    "legs": None,
    "evaluation": {
        "lower_pct": 0.7,
        "upper_pct": 1.3,
        "samples": 101,
        "unbounded_threshold": 100_000.0,
        "risk_limit": 5_000.0,
        "method": BoundaryMethod.SAMPLED.value,
    },
}


def add_strategy_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--spot",
        type=float,
        default=None,
        help="Reference spot price of the underlying.",
    )
    parser.add_argument(
        "--template",
        type=str,
        default=None,
        help="Catalog template (name, 'N. Name' label, slug or number).",
    )
    parser.add_argument(
        "--name",
        dest="strategy_name",
        type=str,
        default=None,
        help="Display name for a strategy built from config legs.",
    )
    parser.add_argument(
        "--lower-pct",
        type=float,
        default=None,
        help="Window lower bound as a fraction of spot (default 0.7).",
    )
    parser.add_argument(
        "--upper-pct",
        type=float,
        default=None,
        help="Window upper bound as a fraction of spot (default 1.3).",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=None,
        help="Number of sampled prices, both ends included.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Magnitude above which a sampled extreme is unbounded.",
    )
    parser.add_argument(
        "--risk-limit",
        type=float,
        default=None,
        help="Finite max loss above which the risk flag is raised.",
    )
    parser.add_argument(
        "--method",
        choices=[m.value for m in BoundaryMethod],
        default=None,
        help="Boundary detection method.",
    )


def collect_strategy_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.spot is not None:
        overrides["spot"] = args.spot
    if args.template is not None:
        # an explicit template wins over legs coming from YAML
        overrides["template"] = args.template
        overrides["legs"] = None
    if args.strategy_name is not None:
        overrides["strategy_name"] = args.strategy_name

    evaluation: dict[str, Any] = {}
    if args.lower_pct is not None:
        evaluation["lower_pct"] = args.lower_pct
    if args.upper_pct is not None:
        evaluation["upper_pct"] = args.upper_pct
    if args.samples is not None:
        evaluation["samples"] = args.samples
    if args.threshold is not None:
        evaluation["unbounded_threshold"] = args.threshold
    if args.risk_limit is not None:
        evaluation["risk_limit"] = args.risk_limit
    if args.method is not None:
        evaluation["method"] = args.method
    if evaluation:
        overrides["evaluation"] = evaluation
    return overrides


def strategy_from_config(config: Mapping[str, Any]) -> Strategy:
    """Resolve the configured strategy (explicit legs win over a template)."""
    spot = float(config["spot"])
    legs = config.get("legs")
    if legs is not None:
        if not isinstance(legs, list):
            raise ValueError("legs must be a list of leg mappings")
        name = config.get("strategy_name") or "Custom strategy"
        return Strategy.from_legs(legs, name=name)

    template_name = config.get("template")
    if not template_name:
        raise ValueError("Either legs or template must be set.")
    strategy = get_template(template_name).generate(spot)
    if config.get("strategy_name"):
        strategy = Strategy(legs=strategy.legs, name=config["strategy_name"])
    return strategy


def evaluation_config_from(config: Mapping[str, Any]) -> EvaluationConfig:
    return EvaluationConfig.from_mapping(config.get("evaluation"))
