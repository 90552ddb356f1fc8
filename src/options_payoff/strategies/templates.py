"""Strategy templates: pure leg blueprints expressed relative to a spot."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import StrEnum

from options_payoff.options.types import LegAction, OptionLeg, OptionType, Strategy


class StrategyCategory(StrEnum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    VOLATILITY = "volatility"
    INCOME = "income"
    HEDGE = "hedge"


@dataclass(frozen=True)
class LegTemplate:
    """One leg whose strike is a fraction of the reference spot."""

    option_type: OptionType
    action: LegAction
    strike_pct: float
    quantity: float = 1.0
    premium: float = 0.0

    def __post_init__(self) -> None:
        if self.strike_pct <= 0:
            raise ValueError("strike_pct must be > 0")

    def build(self, reference_spot: float) -> OptionLeg:
        return OptionLeg(
            option_type=self.option_type,
            action=self.action,
            strike=reference_spot * self.strike_pct,
            quantity=self.quantity,
            premium=self.premium,
        )


@dataclass(frozen=True)
class StrategyTemplate:
    """Named, categorized recipe producing a `Strategy` for any spot.

    Templates hold no state besides their blueprint, so `generate` is a pure
    function of the reference spot.
    """

    number: int
    name: str
    category: StrategyCategory
    description: str
    legs: tuple[LegTemplate, ...]

    @property
    def label(self) -> str:
        return f"{self.number}. {self.name}"

    @property
    def slug(self) -> str:
        return re.sub(r"[^a-z0-9]+", "-", self.name.lower()).strip("-")

    def generate(self, reference_spot: float) -> Strategy:
        """Build the strategy's legs around `reference_spot`."""
        if not math.isfinite(reference_spot) or reference_spot <= 0:
            raise ValueError(f"reference_spot must be > 0 (got {reference_spot})")
        return Strategy(
            legs=tuple(leg.build(reference_spot) for leg in self.legs),
            name=self.name,
        )


def call(action: LegAction, strike_pct: float, quantity: float, premium: float) -> LegTemplate:
    return LegTemplate(OptionType.CALL, action, strike_pct, quantity, premium)


def put(action: LegAction, strike_pct: float, quantity: float, premium: float) -> LegTemplate:
    return LegTemplate(OptionType.PUT, action, strike_pct, quantity, premium)
