"""Layered app configuration: built-in defaults < YAML file < CLI overrides.

Every top-level section that is a mapping in the defaults (`logging`,
`evaluation`, `output`, `store`) must stay a mapping after merging, so a
YAML typo such as `evaluation: 51` fails here instead of deep inside an app.
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Mapping

import yaml


class ConfigError(ValueError):
    """Unreadable config file or a section of the wrong shape."""


def add_config_arg(parser, *, default: str | None = None) -> None:
    parser.add_argument(
        "--config",
        type=str,
        default=default,
        help="Path to a YAML config file.",
    )


def load_yaml_config(path: str | Path | None) -> dict[str, Any]:
    """Top-level mapping of a YAML file; `{}` for no path or an empty file."""
    if path is None:
        return {}

    p = resolve_path(path)
    if not p.is_file():
        raise ConfigError(f"Config file not found: {p}")

    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {p} is not valid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {p} must contain a YAML mapping at the top level.")
    return data


def _merge_into(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    for key, value in updates.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            _merge_into(current, value)
        else:
            target[key] = copy.deepcopy(value)


def deep_merge(
    base: Mapping[str, Any],
    updates: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursive merge returning a new dict; neither input is mutated.

    Nested mappings merge key by key; any other value (lists included)
    replaces the base value wholesale.
    """
    merged = copy.deepcopy(dict(base))
    _merge_into(merged, updates)
    return merged


def _check_sections(defaults: Mapping[str, Any], config: Mapping[str, Any]) -> None:
    for key, default in defaults.items():
        if isinstance(default, Mapping) and not isinstance(config.get(key), Mapping):
            raise ConfigError(
                f"Config section '{key}' must be a mapping (got {config.get(key)!r})"
            )


def build_config(
    defaults: Mapping[str, Any],
    yaml_path: str | Path | None,
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge defaults < YAML file < CLI overrides."""
    config = deep_merge(defaults, load_yaml_config(yaml_path))
    if overrides:
        config = deep_merge(config, overrides)
    _check_sections(defaults, config)
    return config


def resolve_path(value: str | Path | None) -> Path | None:
    """Expand `~` and `$VARS` in a configured path; `None` passes through."""
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    return Path(os.path.expandvars(os.path.expanduser(str(value))))


def resolve_output_path(value: str | Path | None) -> Path | None:
    """Like :func:`resolve_path`, also creating the parent directory."""
    path = resolve_path(value)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
    return path
