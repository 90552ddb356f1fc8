"""Shared option-strategy dataclasses and enums."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from numbers import Integral, Real
from typing import Any, Literal, TypeAlias

import numpy as np

from .errors import LegValidationError, PriceRangeError


class OptionType(StrEnum):
    """Canonical option side labels used across payoff code."""

    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, value: OptionTypeInput) -> OptionType:
        """Accept `call`/`put`, `Call`/`Put` or `C`/`P` (any case)."""
        if isinstance(value, OptionType):
            return value
        key = str(value).strip().lower()
        aliases = {"c": cls.CALL, "call": cls.CALL, "p": cls.PUT, "put": cls.PUT}
        try:
            return aliases[key]
        except KeyError as e:
            raise ValueError(f"Unknown option type: {value!r}") from e


class LegAction(StrEnum):
    """Whether a leg holds the right (buy) or writes the obligation (sell)."""

    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, value: LegActionInput) -> LegAction:
        """Accept `buy`/`sell` or `long`/`short` (any case)."""
        if isinstance(value, LegAction):
            return value
        key = str(value).strip().lower()
        aliases = {
            "buy": cls.BUY,
            "long": cls.BUY,
            "sell": cls.SELL,
            "short": cls.SELL,
        }
        try:
            return aliases[key]
        except KeyError as e:
            raise ValueError(f"Unknown leg action: {value!r}") from e

    @property
    def sign(self) -> int:
        """+1 for long legs, -1 for short legs."""
        return 1 if self is LegAction.BUY else -1


# Tolerant input types accepted at system boundaries (YAML, saved records).
OptionTypeInput: TypeAlias = OptionType | Literal["call", "put", "Call", "Put", "C", "P"]
LegActionInput: TypeAlias = LegAction | Literal["buy", "sell", "Buy", "Sell"]


def _finite_number(name: str, value: Any) -> float:
    # bool is a Real subclass but never a meaningful strike/quantity/premium
    if isinstance(value, bool) or not isinstance(value, Real):
        raise LegValidationError(name, value, "must be a real number")
    number = float(value)
    if not math.isfinite(number):
        raise LegValidationError(name, value, "must be finite")
    return number


@dataclass(frozen=True, slots=True)
class OptionLeg:
    """One option position with its entry premium.

    Legs are immutable: edits go through :meth:`with_changes`, which validates
    and returns a new leg.
    """

    option_type: OptionType
    action: LegAction
    strike: float
    quantity: float = 1.0
    premium: float = 0.0

    def __post_init__(self) -> None:
        try:
            option_type = OptionType.parse(self.option_type)
        except ValueError as e:
            raise LegValidationError(
                "option_type", self.option_type, "must be call or put"
            ) from e
        try:
            action = LegAction.parse(self.action)
        except ValueError as e:
            raise LegValidationError(
                "action", self.action, "must be buy or sell"
            ) from e

        strike = _finite_number("strike", self.strike)
        if strike <= 0:
            raise LegValidationError("strike", self.strike, "must be > 0")
        quantity = _finite_number("quantity", self.quantity)
        if quantity <= 0:
            raise LegValidationError("quantity", self.quantity, "must be > 0")
        premium = _finite_number("premium", self.premium)
        if premium < 0:
            raise LegValidationError("premium", self.premium, "must be >= 0")

        object.__setattr__(self, "option_type", option_type)
        object.__setattr__(self, "action", action)
        object.__setattr__(self, "strike", strike)
        object.__setattr__(self, "quantity", quantity)
        object.__setattr__(self, "premium", premium)

    @property
    def is_short(self) -> bool:
        return self.action is LegAction.SELL

    def with_changes(self, **changes: Any) -> OptionLeg:
        """Return a validated copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the saved-simulation leg shape."""
        return {
            "type": self.option_type.value.capitalize(),
            "action": self.action.value.capitalize(),
            "strike": self.strike,
            "quantity": self.quantity,
            "price": self.premium,
        }

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        *,
        index: int | None = None,
    ) -> OptionLeg:
        """Build a leg from a loose mapping (YAML config or saved record).

        Accepts `type` or `option_type`, and `price` or `premium`.
        """
        option_type = data.get("option_type", data.get("type"))
        premium = data.get("premium", data.get("price", 0.0))
        try:
            if option_type is None:
                raise LegValidationError("option_type", None, "is required")
            if data.get("action") is None:
                raise LegValidationError("action", None, "is required")
            if data.get("strike") is None:
                raise LegValidationError("strike", None, "is required")
            return cls(
                option_type=option_type,
                action=data["action"],
                strike=data["strike"],
                quantity=data.get("quantity", 1.0),
                premium=premium,
            )
        except LegValidationError as e:
            if index is None:
                raise
            raise e.at_index(index) from e


@dataclass(frozen=True)
class Strategy:
    """Ordered collection of legs; order only matters for display."""

    legs: tuple[OptionLeg, ...] = ()
    name: str = "Custom strategy"

    def __post_init__(self) -> None:
        legs = tuple(self.legs)
        for i, leg in enumerate(legs):
            if not isinstance(leg, OptionLeg):
                raise LegValidationError(
                    "leg", leg, "must be an OptionLeg", index=i
                )
        object.__setattr__(self, "legs", legs)

    @classmethod
    def from_legs(
        cls,
        legs: Iterable[OptionLeg | Mapping[str, Any]],
        *,
        name: str = "Custom strategy",
    ) -> Strategy:
        """Build a strategy from legs or leg mappings, tagging errors by index."""
        built: list[OptionLeg] = []
        for i, leg in enumerate(legs):
            if isinstance(leg, OptionLeg):
                built.append(leg)
            elif isinstance(leg, Mapping):
                built.append(OptionLeg.from_mapping(leg, index=i))
            else:
                raise LegValidationError(
                    "leg", leg, "must be an OptionLeg or mapping", index=i
                )
        return cls(legs=tuple(built), name=name)

    def __len__(self) -> int:
        return len(self.legs)

    def __iter__(self) -> Iterator[OptionLeg]:
        return iter(self.legs)

    @property
    def has_short_legs(self) -> bool:
        return any(leg.is_short for leg in self.legs)

    @property
    def strikes(self) -> tuple[float, ...]:
        """Sorted unique strikes across all legs."""
        return tuple(sorted({leg.strike for leg in self.legs}))


@dataclass(frozen=True, slots=True)
class PayoffPoint:
    """Net profit/loss at expiration if spot settles at `price`."""

    price: float
    value: float


@dataclass(frozen=True)
class PriceWindow:
    """Evenly sampled settlement-price window, inclusive of both ends."""

    lower: float
    upper: float
    samples: int = 101

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lower) and math.isfinite(self.upper)):
            raise PriceRangeError("window bounds must be finite")
        if self.lower < 0:
            raise PriceRangeError(f"lower must be >= 0 (got {self.lower})")
        if self.lower >= self.upper:
            raise PriceRangeError(
                f"lower must be < upper (got lower={self.lower}, upper={self.upper})"
            )
        if isinstance(self.samples, bool) or not isinstance(self.samples, Integral):
            raise PriceRangeError(f"samples must be an integer (got {self.samples!r})")
        if self.samples < 2:
            raise PriceRangeError(f"samples must be >= 2 (got {self.samples})")

    @classmethod
    def around(
        cls,
        reference_spot: float,
        *,
        lower_pct: float = 0.7,
        upper_pct: float = 1.3,
        samples: int = 101,
    ) -> PriceWindow:
        """Window spanning `[spot * lower_pct, spot * upper_pct]`."""
        if not math.isfinite(reference_spot) or reference_spot <= 0:
            raise PriceRangeError(
                f"reference_spot must be > 0 (got {reference_spot})"
            )
        return cls(
            lower=reference_spot * lower_pct,
            upper=reference_spot * upper_pct,
            samples=samples,
        )

    @property
    def step(self) -> float:
        return (self.upper - self.lower) / (self.samples - 1)

    def prices(self) -> tuple[float, ...]:
        """Return the sample grid as plain floats."""
        grid = np.linspace(self.lower, self.upper, self.samples)
        return tuple(float(p) for p in grid)

    def contains(self, price: float) -> bool:
        return self.lower <= price <= self.upper


@dataclass(frozen=True)
class PriceMarkers:
    """Reference lines handed to the charting consumer."""

    reference_spot: float
    breakevens: tuple[float, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "referenceSpot": self.reference_spot,
            "breakevens": list(self.breakevens),
        }
