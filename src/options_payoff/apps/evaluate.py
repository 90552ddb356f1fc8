#!/usr/bin/env python
"""Evaluate an option strategy's expiration payoff, metrics and risk.

Typical usage:
    python -m options_payoff.apps.evaluate --template "Iron Condor" --spot 100
    python -m options_payoff.apps.evaluate --config config/evaluate.yml --json
    options-payoff-evaluate --template 28 --method analytic --curve-csv curve.csv
    options-payoff-evaluate --list-templates --category income

Config precedence: CLI > YAML > defaults.
"""

from __future__ import annotations

import argparse
import logging
from typing import Any

import pandas as pd

from options_payoff.apps._cli import (
    add_print_config_arg,
    collect_logging_overrides,
    exit_invalid_config,
    print_config,
    to_json,
)
from options_payoff.apps._strategy import (
    DEFAULT_STRATEGY_CONFIG,
    add_strategy_args,
    collect_strategy_overrides,
    evaluation_config_from,
    strategy_from_config,
)
from options_payoff.cli import (
    ConfigError,
    DEFAULT_LOGGING,
    add_config_arg,
    add_logging_args,
    build_config,
    deep_merge,
    resolve_output_path,
    setup_logging_from_config,
)
from options_payoff.options import (
    PayoffError,
    StrategyEvaluation,
    evaluate_strategy,
    is_unbounded,
)
from options_payoff.strategies import StrategyCategory, list_templates

DEFAULT_CONFIG: dict[str, Any] = deep_merge(
    {
        "logging": DEFAULT_LOGGING,
        "output": {
            "curve_csv": None,
            "json": False,
        },
    },
    DEFAULT_STRATEGY_CONFIG,
)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Evaluate the expiration payoff of an option strategy."
    )
    add_config_arg(parser)
    add_logging_args(parser)
    add_print_config_arg(parser)
    add_strategy_args(parser)

    parser.add_argument(
        "--curve-csv",
        type=str,
        default=None,
        help="Write the sampled payoff curve (price,value) to this CSV file.",
    )
    parser.add_argument(
        "--json",
        dest="json",
        action="store_true",
        default=None,
        help="Print the full evaluation as JSON.",
    )
    parser.add_argument(
        "--list-templates",
        action="store_true",
        help="List catalog templates and exit.",
    )
    parser.add_argument(
        "--category",
        choices=[c.value for c in StrategyCategory],
        default=None,
        help="Restrict --list-templates to one category.",
    )
    return parser.parse_args(argv)


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides = collect_strategy_overrides(args)

    output: dict[str, Any] = {}
    if args.curve_csv is not None:
        output["curve_csv"] = args.curve_csv
    if args.json is not None:
        output["json"] = args.json
    if output:
        overrides["output"] = output

    logging_overrides = collect_logging_overrides(args)
    if logging_overrides:
        overrides["logging"] = logging_overrides

    return overrides


def templates_frame(category: str | None = None) -> pd.DataFrame:
    """Catalog overview, one row per template."""
    rows = [
        {
            "number": t.number,
            "name": t.name,
            "category": t.category.value,
            "legs": len(t.legs),
            "description": t.description,
        }
        for t in list_templates(category)
    ]
    return pd.DataFrame(rows, columns=["number", "name", "category", "legs", "description"])


def _fmt_bound(value: Any) -> str:
    return "unbounded" if is_unbounded(value) else f"{value:.2f}"


def log_summary(logger: logging.Logger, evaluation: StrategyEvaluation) -> None:
    metrics = evaluation.metrics
    risk = evaluation.risk
    if metrics.cost > 0:
        side = "net debit"
    elif metrics.cost < 0:
        side = "net credit"
    else:
        side = "no net premium"
    breakevens = ", ".join(f"{b:.2f}" for b in metrics.breakevens) or "none in window"
    margin = risk.margin_value
    margin_str = margin if isinstance(margin, str) else f"{margin:.2f}"

    logger.info("Strategy:      %s (%d legs)", evaluation.strategy.name, len(evaluation.strategy))
    logger.info("Spot:          %.2f", evaluation.reference_spot)
    logger.info(
        "Window:        %.2f .. %.2f (%d samples)",
        evaluation.window.lower,
        evaluation.window.upper,
        evaluation.window.samples,
    )
    logger.info("Cost:          %.2f (%s)", abs(metrics.cost), side)
    logger.info("Max profit:    %s", _fmt_bound(metrics.max_profit))
    logger.info("Max loss:      %s", _fmt_bound(metrics.max_loss))
    logger.info("Breakevens:    %s", breakevens)
    logger.info("Margin:        %s (%s)", risk.margin_type.value, margin_str)
    logger.info("Risk profile:  %s", risk.risk_profile.value)
    logger.info("Alert level:   %s", risk.alert_level.value)
    if risk.exceeds_risk_limit:
        logger.warning("Risk control:  max loss exceeds the configured limit")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    overrides = _build_overrides(args)
    try:
        config = build_config(DEFAULT_CONFIG, args.config, overrides)
    except ConfigError as e:
        exit_invalid_config(e)

    if args.print_config:
        print_config(config)
        return

    try:
        setup_logging_from_config(config.get("logging"))
    except ConfigError as e:
        exit_invalid_config(e)
    logger = logging.getLogger(__name__)

    if args.list_templates:
        with pd.option_context("display.max_colwidth", 60, "display.width", 200):
            print(templates_frame(args.category).to_string(index=False))
        return

    try:
        strategy = strategy_from_config(config)
        evaluation = evaluate_strategy(
            strategy,
            float(config["spot"]),
            evaluation_config_from(config),
        )
    except (PayoffError, KeyError, TypeError, ValueError) as e:
        logger.error("Invalid input: %s", e)
        raise SystemExit(2) from e

    log_summary(logger, evaluation)

    output = config.get("output", {})
    curve_csv = resolve_output_path(output.get("curve_csv"))
    if curve_csv is not None:
        evaluation.frame().to_csv(curve_csv, index=False)
        logger.info("Wrote payoff curve to %s", curve_csv)

    if output.get("json"):
        print(to_json(evaluation.to_dict()))


if __name__ == "__main__":
    main()
