from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest
import yaml


@pytest.fixture
def write_yaml(tmp_path: Path):
    """Dump `data` as YAML under tmp_path and return the file path."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def condor_config() -> dict[str, Any]:
    return {
        "spot": 100.0,
        "strategy_name": "Custom iron condor",
        "legs": [
            {"type": "Put", "action": "Buy", "strike": 90.0, "price": 1.0},
            {"type": "Put", "action": "Sell", "strike": 95.0, "price": 3.0},
            {"type": "Call", "action": "Sell", "strike": 105.0, "price": 3.0},
            {"type": "Call", "action": "Buy", "strike": 110.0, "price": 1.0},
        ],
        "evaluation": {"samples": 51, "method": "analytic"},
    }


@pytest.fixture
def restore_root_logging():
    """Undo `setup_logging` so later tests see pytest's own handlers."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
