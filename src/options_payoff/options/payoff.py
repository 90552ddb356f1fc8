"""Expiration payoff of option legs over a sampled settlement-price range.

The curve is recomputed on every call; nothing is cached between calls and
inputs are never mutated.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import pandas as pd

from .errors import PriceRangeError
from .types import OptionLeg, OptionType, PayoffPoint, PriceWindow


def intrinsic_value(option_type: OptionType, strike: float, spot: float) -> float:
    """Intrinsic value at expiry of one option unit settled at `spot`."""
    if option_type == OptionType.CALL:
        return max(0.0, spot - strike)
    return max(0.0, strike - spot)


def leg_pnl(leg: OptionLeg, spot: float) -> float:
    """Signed expiration P/L contributed by one leg."""
    value = intrinsic_value(leg.option_type, leg.strike, spot) * leg.quantity
    cost = leg.premium * leg.quantity
    if leg.action.sign > 0:
        return value - cost
    return cost - value


def payoff_at(legs: Iterable[OptionLeg], spot: float) -> float:
    """Net expiration P/L of all legs at one settlement price."""
    return sum((leg_pnl(leg, spot) for leg in legs), 0.0)


def _validated_prices(prices: Sequence[float] | PriceWindow) -> tuple[float, ...]:
    if isinstance(prices, PriceWindow):
        return prices.prices()

    grid = tuple(float(p) for p in prices)
    if len(grid) < 2:
        raise PriceRangeError(f"price range needs >= 2 samples (got {len(grid)})")
    if not all(math.isfinite(p) for p in grid):
        raise PriceRangeError("price range must only contain finite prices")
    if any(b <= a for a, b in zip(grid, grid[1:])):
        raise PriceRangeError("price range must be strictly increasing")
    return grid


def payoff_curve(
    legs: Iterable[OptionLeg],
    prices: Sequence[float] | PriceWindow,
) -> tuple[PayoffPoint, ...]:
    """Map legs and a price range to one `PayoffPoint` per sampled price.

    Output order and length match the input range. An empty leg collection
    yields an all-zero curve.
    """
    legs = tuple(legs)
    grid = _validated_prices(prices)
    return tuple(PayoffPoint(price=p, value=payoff_at(legs, p)) for p in grid)


def curve_frame(points: Iterable[PayoffPoint]) -> pd.DataFrame:
    """Tabular view of a curve (`price`, `value`) for plotting/export."""
    rows = [(p.price, p.value) for p in points]
    return pd.DataFrame(rows, columns=["price", "value"])
