"""Logging setup for the command-line entrypoints.

Library modules only do `logger = logging.getLogger(__name__)`; the apps call
`setup_logging_from_config` once with the merged `logging` config section.

Console records carry `%(shortname)s`, the last dotted part of the logger
name (`engine` for `options_payoff.options.engine`). The file handler always
logs the full name.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .config import ConfigError, resolve_path

DEFAULT_LOGGING: dict[str, Any] = {
    "level": "INFO",
    "format": "%(asctime)s %(levelname)s %(shortname)s - %(message)s",
    "file": None,
    "color": True,
}

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def add_logging_args(parser) -> None:
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Root level name or number (default INFO).",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file.",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        default=None,
        help="Console log format; %%(shortname)s is available.",
    )
    parser.add_argument(
        "--color",
        dest="log_color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Colour the console level names (--no-color for plain output).",
    )


def coerce_level(level: int | str) -> int:
    """Level from an int, a digit string or a level name (any case)."""
    if isinstance(level, bool):
        raise ConfigError(f"Unknown logging level: {level!r}")
    if isinstance(level, int):
        return level

    name = str(level).strip().upper()
    if name.isdigit():
        return int(name)
    try:
        return logging.getLevelNamesMapping()[name]
    except KeyError as e:
        raise ConfigError(f"Unknown logging level: {level!r}") from e


@dataclass(frozen=True)
class LoggingSettings:
    """Validated `logging` config section."""

    level: int = logging.INFO
    format: str = DEFAULT_LOGGING["format"]
    file: Path | None = None
    color: bool = True

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> LoggingSettings:
        """Defaults overlaid with the non-null known keys of `config`."""
        merged = dict(DEFAULT_LOGGING)
        for key in merged:
            if config and config.get(key) is not None:
                merged[key] = config[key]

        if not isinstance(merged["color"], bool):
            raise ConfigError(f"logging.color must be true/false (got {merged['color']!r})")
        fmt = str(merged["format"])
        if not fmt.strip():
            raise ConfigError("logging.format must not be empty")

        return cls(
            level=coerce_level(merged["level"]),
            format=fmt,
            file=resolve_path(merged["file"]),
            color=merged["color"],
        )


class _ShortNameFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.shortname = record.name.rpartition(".")[2]
        return True


class _LevelColorFormatter(logging.Formatter):
    """Wraps the level name in an ANSI colour; other fields are untouched."""

    _CODES = {
        "DEBUG": "36",
        "INFO": "32",
        "WARNING": "33",
        "ERROR": "31",
        "CRITICAL": "1;31",
    }

    def formatMessage(self, record: logging.LogRecord) -> str:
        code = self._CODES.get(record.levelname)
        if code is None:
            return super().formatMessage(record)
        # format a copy so other handlers see the plain level name
        tinted = logging.makeLogRecord(
            {**record.__dict__, "levelname": f"\033[{code}m{record.levelname}\033[0m"}
        )
        return super().formatMessage(tinted)


def setup_logging(settings: LoggingSettings) -> None:
    """Replace the root handlers with a console (and optional file) handler."""
    console = logging.StreamHandler()
    console.addFilter(_ShortNameFilter())
    formatter_cls = _LevelColorFormatter if settings.color else logging.Formatter
    console.setFormatter(formatter_cls(fmt=settings.format, datefmt=DATE_FORMAT))
    handlers: list[logging.Handler] = [console]

    if settings.file is not None:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=settings.level, handlers=handlers, force=True)


def setup_logging_from_config(config: Mapping[str, Any] | None) -> None:
    setup_logging(LoggingSettings.from_config(config))
