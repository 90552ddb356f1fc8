from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

REPO_ROOT = Path(__file__).resolve().parents[3]


@pytest.fixture
def example_config() -> str:
    return str(REPO_ROOT / "config" / "evaluate.yml")


@pytest.fixture
def parse_printed_config():
    def _parse(text: str) -> dict[str, Any]:
        return json.loads(text)

    return _parse


@pytest.fixture
def run_help(capsys):
    def _run(mod, expected: str, *args: str) -> None:
        with pytest.raises(SystemExit) as exc:
            mod.main([*args, "--help"])
        assert exc.value.code == 0
        out = capsys.readouterr().out
        assert expected in out

    return _run


@pytest.fixture
def quiet_logging(monkeypatch):
    """Keep pytest's capture handler attached while an app runs."""

    def _apply(mod) -> None:
        monkeypatch.setattr(mod, "setup_logging_from_config", lambda cfg: None)

    return _apply
