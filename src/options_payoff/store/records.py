"""Value shapes exchanged with the remote saved-simulation store.

Requests are sent as::

    {"action": "create"|"update", "id", "strategyName",
     "referenceSpot", "legs": [...], "metrics": {...}}
    {"action": "delete", "id"}

and loads return a list of the same shape plus a `timestamp`. Older records
written as `{name, spot, legsData}` are also accepted.
"""

from __future__ import annotations

import json
import math
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

import pandas as pd

from options_payoff.options.engine import StrategyEvaluation
from options_payoff.options.errors import LegValidationError
from options_payoff.options.metrics import Metrics
from options_payoff.options.types import OptionLeg, Strategy
from options_payoff.store.errors import StoreError

_NAME_KEYS = ("strategyName", "name")
_SPOT_KEYS = ("referenceSpot", "spotPrice", "spot")
_LEGS_KEYS = ("legs", "legsData")


class StoreAction(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def new_record_id() -> str:
    """Short random identifier for a new saved simulation."""
    return uuid.uuid4().hex[:9]


@dataclass(frozen=True)
class SimulationRequest:
    """One create/update request for the remote store."""

    action: StoreAction
    id: str
    strategy_name: str
    reference_spot: float
    legs: tuple[OptionLeg, ...]
    metrics: Metrics

    def to_payload(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "id": self.id,
            "strategyName": self.strategy_name,
            "referenceSpot": self.reference_spot,
            "legs": [leg.to_dict() for leg in self.legs],
            "metrics": self.metrics.to_dict(),
        }


@dataclass(frozen=True)
class DeleteRequest:
    """Removes one saved simulation; carries no strategy payload."""

    id: str

    def __post_init__(self) -> None:
        if not self.id or not str(self.id).strip():
            raise ValueError("delete requests require an id")

    @property
    def action(self) -> StoreAction:
        return StoreAction.DELETE

    def to_payload(self) -> dict[str, Any]:
        return {"action": self.action.value, "id": self.id}


def build_request(
    action: StoreAction | str,
    evaluation: StrategyEvaluation,
    *,
    id: str | None = None,
) -> SimulationRequest:
    """Build a create or update request from an evaluation.

    Creates get a fresh id when none is given; updates must name the record
    they target. Deletes go through :class:`DeleteRequest`.
    """
    action = StoreAction(str(action).lower())
    if action is StoreAction.DELETE:
        raise ValueError("delete requests carry no strategy; use DeleteRequest")
    if id is None:
        if action is StoreAction.UPDATE:
            raise ValueError("update requests require an id")
        id = new_record_id()

    return SimulationRequest(
        action=action,
        id=id,
        strategy_name=evaluation.strategy.name,
        reference_spot=evaluation.reference_spot,
        legs=evaluation.strategy.legs,
        metrics=evaluation.metrics,
    )


def _first(data: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = pd.to_datetime(value, unit="ms", utc=True)
    else:
        ts = pd.Timestamp(value)
    if ts is pd.NaT:
        return None
    return ts.to_pydatetime()


def _parse_spot(value: Any) -> float:
    try:
        spot = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"referenceSpot must be numeric (got {value!r})") from e
    if not math.isfinite(spot) or spot <= 0:
        raise ValueError(f"referenceSpot must be > 0 (got {value!r})")
    return spot


@dataclass(frozen=True)
class SimulationRecord:
    """A previously saved simulation as returned by the store."""

    id: str | None
    strategy_name: str
    reference_spot: float
    legs: tuple[OptionLeg, ...]
    metrics: Metrics | None
    timestamp: datetime | None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> SimulationRecord:
        """Parse one record; raises `ValueError` for malformed content."""
        if not isinstance(data, Mapping):
            raise ValueError(f"record must be an object (got {type(data).__name__})")

        raw_legs = _first(data, _LEGS_KEYS)
        if isinstance(raw_legs, str):
            raw_legs = json.loads(raw_legs)
        if raw_legs is None:
            raw_legs = []
        if not isinstance(raw_legs, list):
            raise ValueError("legs must be a list")
        legs = tuple(
            OptionLeg.from_mapping(leg, index=i) for i, leg in enumerate(raw_legs)
        )

        raw_metrics = data.get("metrics")
        if isinstance(raw_metrics, str):
            raw_metrics = json.loads(raw_metrics)
        metrics = Metrics.from_dict(raw_metrics) if raw_metrics else None

        record_id = data.get("id")
        return cls(
            id=None if record_id in (None, "") else str(record_id),
            strategy_name=str(_first(data, _NAME_KEYS) or "Custom strategy"),
            reference_spot=_parse_spot(_first(data, _SPOT_KEYS)),
            legs=legs,
            metrics=metrics,
            timestamp=_parse_timestamp(data.get("timestamp")),
        )

    def to_strategy(self) -> Strategy:
        return Strategy(legs=self.legs, name=self.strategy_name)


def parse_records(payload: Any) -> list[SimulationRecord]:
    """Parse the list returned by a store load.

    Raises:
        StoreError: if the payload is not a list or a record is malformed; the
            message names the record index.
    """
    if not isinstance(payload, list):
        raise StoreError(
            f"Expected a list of saved simulations, got {type(payload).__name__}"
        )

    records: list[SimulationRecord] = []
    for i, item in enumerate(payload):
        try:
            records.append(SimulationRecord.from_payload(item))
        except (LegValidationError, ValueError, KeyError, TypeError) as e:
            raise StoreError(f"Malformed saved simulation at index {i}: {e}") from e
    return records
