from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
import requests

from options_payoff.options import Strategy, evaluate_strategy
from options_payoff.store import (
    DeleteRequest,
    SimulationStoreClient,
    StoreError,
    build_request,
)
from options_payoff.store import client as client_mod


@dataclass
class _FakeResponse:
    status_code: int = 200
    body: Any = None

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(
                f"{self.status_code} error", response=self
            )

    def json(self) -> Any:
        if isinstance(self.body, Exception):
            raise self.body
        return self.body


@dataclass
class _FakeSession:
    responses: list[Any]
    calls: list[dict[str, Any]] = field(default_factory=list)
    closed: bool = False

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch):
    sleeps: list[float] = []
    monkeypatch.setattr(client_mod.time, "sleep", sleeps.append)
    return sleeps


@pytest.fixture
def request_():
    strategy = Strategy.from_legs(
        [{"type": "Put", "action": "Sell", "strike": 95, "price": 2.0}],
        name="Short Put",
    )
    return build_request("create", evaluate_strategy(strategy, 100.0), id="abc")


def _client(**kwargs: Any) -> SimulationStoreClient:
    return SimulationStoreClient(base_url="https://store.example/exec", **kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_url": ""},
        {"base_url": "https://x", "timeout_s": 0},
        {"base_url": "https://x", "max_retries": -1},
        {"base_url": "https://x", "backoff_s": -0.1},
    ],
)
def test_client_validates_settings(kwargs) -> None:
    with pytest.raises(ValueError):
        SimulationStoreClient(**kwargs)


def test_save_posts_payload(request_) -> None:
    session = _FakeSession([_FakeResponse(200, {"ok": True})])

    _client().save(request_, session=session)

    (call,) = session.calls
    assert call["method"] == "POST"
    assert call["url"] == "https://store.example/exec"
    assert call["json"]["id"] == "abc"
    assert call["json"]["strategyName"] == "Short Put"
    assert call["timeout"] == 30.0
    assert session.closed is False


def test_save_delete_sends_id_only(caplog) -> None:
    session = _FakeSession([_FakeResponse(200, {"ok": True})])

    with caplog.at_level("INFO", logger="options_payoff.store.client"):
        _client().save(DeleteRequest(id="abc"), session=session)

    (call,) = session.calls
    assert call["method"] == "POST"
    assert call["json"] == {"action": "delete", "id": "abc"}
    assert "Store delete ok id=abc" in caplog.text


def test_save_retries_on_server_error(request_, _no_sleep) -> None:
    session = _FakeSession([_FakeResponse(503), _FakeResponse(200)])

    _client(max_retries=2).save(request_, session=session)

    assert len(session.calls) == 2
    assert len(_no_sleep) == 1


def test_save_retries_on_timeout_then_gives_up(request_, _no_sleep) -> None:
    session = _FakeSession(
        [requests.exceptions.Timeout("slow"), requests.exceptions.ConnectionError("down")]
    )

    with pytest.raises(StoreError, match="Store POST failed") as excinfo:
        _client(max_retries=1).save(request_, session=session)

    assert isinstance(excinfo.value.__cause__, requests.exceptions.ConnectionError)
    assert len(session.calls) == 2
    assert len(_no_sleep) == 1


def test_client_error_fails_fast(request_, _no_sleep) -> None:
    session = _FakeSession([_FakeResponse(403), _FakeResponse(200)])

    with pytest.raises(StoreError) as excinfo:
        _client(max_retries=3).save(request_, session=session)

    assert isinstance(excinfo.value.__cause__, requests.exceptions.HTTPError)
    assert len(session.calls) == 1
    assert _no_sleep == []


def test_exhausted_retries_surface_http_error(request_) -> None:
    session = _FakeSession([_FakeResponse(500), _FakeResponse(500)])

    with pytest.raises(StoreError):
        _client(max_retries=1).save(request_, session=session)

    assert len(session.calls) == 2


def test_load_parses_records() -> None:
    body = [
        {
            "id": "r1",
            "strategyName": "Long Call",
            "referenceSpot": 100,
            "legs": [{"type": "Call", "action": "Buy", "strike": 100, "quantity": 1, "price": 2.5}],
            "metrics": {"cost": 2.5, "maxProfit": "unbounded", "maxLoss": -2.5, "breakevens": [103.0]},
            "timestamp": "2024-01-02T03:04:05Z",
        }
    ]
    session = _FakeSession([_FakeResponse(200, body)])

    records = _client().load(session=session)

    assert session.calls[0]["method"] == "GET"
    assert session.calls[0]["json"] is None
    assert [r.id for r in records] == ["r1"]
    assert records[0].legs[0].strike == 100.0


def test_load_rejects_non_json_body() -> None:
    session = _FakeSession([_FakeResponse(200, ValueError("no json"))])

    with pytest.raises(StoreError, match="non-JSON"):
        _client().load(session=session)


def test_client_closes_session_it_creates(monkeypatch) -> None:
    session = _FakeSession([_FakeResponse(200, [])])
    monkeypatch.setattr(client_mod.requests, "Session", lambda: session)

    assert _client().load() == []
    assert session.closed is True


def test_jitter_sleep_bounds(monkeypatch) -> None:
    monkeypatch.setattr(client_mod.random, "random", lambda: 0.0)
    assert client_mod.jitter_sleep(1.0) == pytest.approx(0.7)
    monkeypatch.setattr(client_mod.random, "random", lambda: 1.0)
    assert client_mod.jitter_sleep(1.0) == pytest.approx(1.3)
