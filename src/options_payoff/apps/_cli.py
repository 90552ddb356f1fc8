"""Shared CLI helper utilities for app entrypoints."""

from __future__ import annotations

import json
import sys
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, NoReturn


def add_print_config_arg(parser) -> None:
    """Add a `--print-config` flag to a parser."""
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print merged config (JSON) and exit.",
    )


def add_dry_run_arg(parser) -> None:
    """Add a `--dry-run` flag to a parser."""
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build and log the request without sending it.",
    )


def collect_logging_overrides(args) -> dict[str, Any]:
    """Collect logging override values from parsed CLI args."""
    overrides: dict[str, Any] = {}
    if getattr(args, "log_level", None):
        overrides["level"] = args.log_level
    if getattr(args, "log_file", None):
        overrides["file"] = args.log_file
    if getattr(args, "log_format", None):
        overrides["format"] = args.log_format
    if getattr(args, "log_color", None) is not None:
        overrides["color"] = args.log_color
    return overrides


def _normalize(obj: Any) -> Any:
    """Convert paths/enums/mappings/sequences to JSON-serializable structures."""
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Mapping):
        return {str(k): _normalize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [_normalize(v) for v in obj]
    return obj


def to_json(obj: Any) -> str:
    return json.dumps(_normalize(obj), indent=2, sort_keys=True)


def print_config(config: Mapping[str, Any]) -> None:
    """Pretty-print merged config as deterministic JSON."""
    print(to_json(config))


def log_dry_run(logger, plan: Mapping[str, Any]) -> None:
    """Log the dry-run plan as formatted JSON."""
    logger.info("DRY RUN: no request was sent.")
    logger.info("DRY RUN plan:\n%s", to_json(plan))


def exit_invalid_config(error: Exception) -> NoReturn:
    """Report a bad config file or section and exit with status 2."""
    print(f"Invalid config: {error}", file=sys.stderr)
    raise SystemExit(2) from error
