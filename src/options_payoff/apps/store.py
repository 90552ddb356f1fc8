#!/usr/bin/env python
"""Save, update, delete or list simulations in the remote store.

Typical usage:
    options-payoff-store save --template "Iron Condor" --spot 100
    options-payoff-store update --id a1b2c3d4e --config config/evaluate.yml
    options-payoff-store delete --id a1b2c3d4e
    options-payoff-store load
    python -m options_payoff.apps.store save --template 3 --dry-run

Notes
-----
- The store URL is read from the `OPTIONS_PAYOFF_STORE_URL` env var (or a
  .env file at project root) unless provided via CLI/YAML.
- Config precedence: CLI > YAML > defaults.
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Any

from dotenv import load_dotenv

from options_payoff.apps._cli import (
    add_dry_run_arg,
    add_print_config_arg,
    collect_logging_overrides,
    exit_invalid_config,
    log_dry_run,
    print_config,
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
    setup_logging_from_config,
)
from options_payoff.options import PayoffError, evaluate_strategy
from options_payoff.store import (
    STORE_URL_ENV,
    DeleteRequest,
    SimulationRequest,
    SimulationStoreClient,
    StoreAction,
    StoreError,
    build_request,
)

COMMANDS = ("save", "update", "delete", "load")

DEFAULT_CONFIG: dict[str, Any] = deep_merge(
    {
        "logging": DEFAULT_LOGGING,
        "dry_run": False,
        "id": None,
        "store": {
            "url": None,
            "url_env": STORE_URL_ENV,
            "timeout_s": 30.0,
            "max_retries": 1,
            "backoff_s": 0.75,
        },
    },
    DEFAULT_STRATEGY_CONFIG,
)

_ACTIONS = {
    "save": StoreAction.CREATE,
    "update": StoreAction.UPDATE,
}


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Persist or list strategy simulations in the remote store."
    )
    parser.add_argument("command", choices=COMMANDS, help="Store operation.")
    add_config_arg(parser)
    add_logging_args(parser)
    add_print_config_arg(parser)
    add_dry_run_arg(parser)
    add_strategy_args(parser)

    parser.add_argument(
        "--id",
        type=str,
        default=None,
        help="Record id (required for update/delete).",
    )
    parser.add_argument(
        "--store-url",
        type=str,
        default=None,
        help="Store endpoint URL (overrides env).",
    )
    parser.add_argument(
        "--store-url-env",
        type=str,
        default=None,
        help="Env var name holding the store URL.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds.",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Retries for transient store failures.",
    )
    return parser.parse_args(argv)


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides = collect_strategy_overrides(args)

    if args.id is not None:
        overrides["id"] = args.id
    if args.dry_run:
        overrides["dry_run"] = True

    store: dict[str, Any] = {}
    if args.store_url is not None:
        store["url"] = args.store_url
    if args.store_url_env is not None:
        store["url_env"] = args.store_url_env
    if args.timeout is not None:
        store["timeout_s"] = args.timeout
    if args.max_retries is not None:
        store["max_retries"] = args.max_retries
    if store:
        overrides["store"] = store

    logging_overrides = collect_logging_overrides(args)
    if logging_overrides:
        overrides["logging"] = logging_overrides

    return overrides


def _client_from_config(store_cfg: dict[str, Any]) -> SimulationStoreClient:
    load_dotenv()
    url_env = store_cfg.get("url_env") or STORE_URL_ENV
    url = store_cfg.get("url") or os.getenv(url_env)
    if not url:
        raise StoreError(
            f"Missing store URL. Set env var {url_env} or pass --store-url."
        )
    return SimulationStoreClient(
        base_url=url,
        timeout_s=float(store_cfg["timeout_s"]),
        max_retries=int(store_cfg["max_retries"]),
        backoff_s=float(store_cfg["backoff_s"]),
    )


def _run_load(client: SimulationStoreClient, logger: logging.Logger) -> None:
    records = client.load()
    if not records:
        logger.info("No saved simulations.")
        return
    for record in records:
        when = record.timestamp.strftime("%Y-%m-%d") if record.timestamp else "-"
        print(
            f"{record.id or '-':<10} {when:<10} {record.strategy_name:<36} "
            f"spot={record.reference_spot:.2f} legs={len(record.legs)}"
        )


def _build_request(
    command: str, config: dict[str, Any]
) -> SimulationRequest | DeleteRequest:
    if command == "delete":
        return DeleteRequest(id=config.get("id"))
    strategy = strategy_from_config(config)
    evaluation = evaluate_strategy(
        strategy,
        float(config["spot"]),
        evaluation_config_from(config),
    )
    return build_request(_ACTIONS[command], evaluation, id=config.get("id"))


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

    if args.command == "load":
        if config.get("dry_run"):
            log_dry_run(logger, {"action": "load"})
            return
        try:
            _run_load(_client_from_config(config["store"]), logger)
        except StoreError as e:
            logger.error("Load failed: %s", e)
            raise SystemExit(1) from e
        return

    try:
        request = _build_request(args.command, config)
    except (PayoffError, KeyError, TypeError, ValueError) as e:
        logger.error("Invalid input: %s", e)
        raise SystemExit(2) from e

    if config.get("dry_run"):
        log_dry_run(logger, request.to_payload())
        return

    try:
        _client_from_config(config["store"]).save(request)
    except StoreError as e:
        logger.error("Save failed: %s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
