"""Summary metrics derived from option legs and their payoff curve.

Two boundary methods are provided:

- ``SAMPLED`` (default): extrema and breakevens are read off the sampled
  curve. Max profit / max loss are reported as :data:`UNBOUNDED` when the
  sampled extreme crosses a fixed magnitude threshold, or when the payoff
  keeps rising / falling above the highest strike, so a naked short call is
  unbounded however narrow the window. Finite extrema are the sampled ones
  and depend on the window width. Breakevens outside the window are not
  reported; inside it their error is bounded by the sampling step.
- ``ANALYTIC``: the payoff is piecewise linear in spot with breakpoints at the
  strikes, so extrema are evaluated exactly at ``{0, strikes}``, unboundedness
  comes from the slope above the highest strike, and breakevens are the exact
  segment roots inside the window.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeAlias

from .errors import PayoffError
from .payoff import payoff_at
from .types import OptionLeg, OptionType, PayoffPoint, PriceWindow

DEFAULT_UNBOUNDED_THRESHOLD = 100_000.0
BREAKEVEN_DECIMALS = 2

_SLOPE_TOL = 1e-12
_UNBOUNDED_LABELS = {"unbounded", "ilimitado"}


class Unbounded:
    """Sentinel for a max profit/loss that is effectively unbounded."""

    _instance: Unbounded | None = None

    def __new__(cls) -> Unbounded:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNBOUNDED"

    def __str__(self) -> str:
        return "unbounded"

    def __reduce__(self):
        return (Unbounded, ())


UNBOUNDED = Unbounded()

Bound: TypeAlias = float | Unbounded


def is_unbounded(value: object) -> bool:
    return value is UNBOUNDED


def _bound_to_wire(value: Bound) -> float | str:
    return str(UNBOUNDED) if is_unbounded(value) else float(value)


def _bound_from_wire(name: str, value: Any) -> Bound:
    if isinstance(value, str):
        if value.strip().lower() in _UNBOUNDED_LABELS:
            return UNBOUNDED
        try:
            return float(value)
        except ValueError as e:
            raise ValueError(f"{name} must be a number or 'unbounded'") from e
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{name} must be a number or 'unbounded'")
    return float(value)


class BoundaryMethod(StrEnum):
    """How extrema and breakevens are determined."""

    SAMPLED = "sampled"
    ANALYTIC = "analytic"


@dataclass(frozen=True)
class Metrics:
    """Entry cost, extrema and breakevens of one strategy.

    `cost` is signed: positive is a net debit paid, negative a net credit.
    """

    cost: float
    max_profit: Bound
    max_loss: Bound
    breakevens: tuple[float, ...] = ()
    method: BoundaryMethod = BoundaryMethod.SAMPLED

    @property
    def is_debit(self) -> bool:
        return self.cost > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the saved-simulation metrics shape."""
        return {
            "cost": self.cost,
            "maxProfit": _bound_to_wire(self.max_profit),
            "maxLoss": _bound_to_wire(self.max_loss),
            "breakevens": list(self.breakevens),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Metrics:
        """Inverse of :meth:`to_dict`; also accepts the legacy `Ilimitado` label."""
        return cls(
            cost=float(data["cost"]),
            max_profit=_bound_from_wire("maxProfit", data["maxProfit"]),
            max_loss=_bound_from_wire("maxLoss", data["maxLoss"]),
            breakevens=tuple(float(b) for b in data.get("breakevens") or ()),
        )


def net_cost(legs: Iterable[OptionLeg]) -> float:
    """Signed net premium: bought legs add, sold legs subtract."""
    return sum((leg.action.sign * leg.premium * leg.quantity for leg in legs), 0.0)


def find_breakevens(
    points: Sequence[PayoffPoint],
    decimals: int = BREAKEVEN_DECIMALS,
) -> tuple[float, ...]:
    """Prices where the sampled curve crosses zero, strictly inside the range.

    A crossing is an adjacent pair going from `< 0` to `>= 0` or from `> 0`
    to `<= 0`; the price of the second point is recorded, rounded. A crossing
    that ends on the last sample is interpolated inside the last segment
    instead, and dropped when the root is the last sample itself.
    """
    if len(points) < 2:
        return ()
    lower, upper = points[0].price, points[-1].price
    last = len(points) - 1

    found: list[float] = []
    for i in range(1, len(points)):
        prev, curr = points[i - 1], points[i]
        rising = prev.value < 0 <= curr.value
        falling = prev.value > 0 >= curr.value
        if not (rising or falling):
            continue
        price = curr.price
        if i == last:
            if curr.value == 0:
                continue
            price = prev.price - prev.value * (curr.price - prev.price) / (
                curr.value - prev.value
            )
        price = round(price, decimals)
        if lower < price < upper:
            found.append(price)
    return tuple(found)


def compute_metrics(
    legs: Iterable[OptionLeg],
    points: Sequence[PayoffPoint],
    *,
    threshold: float = DEFAULT_UNBOUNDED_THRESHOLD,
    decimals: int = BREAKEVEN_DECIMALS,
) -> Metrics:
    """Metrics from the sampled curve.

    An extreme is unbounded when it crosses `threshold` or when the slope
    above the highest strike runs that way.
    """
    if not points:
        raise PayoffError("cannot compute metrics from an empty payoff curve")
    if threshold <= 0:
        raise ValueError("threshold must be > 0")

    legs = tuple(legs)
    right_slope = _right_slope(legs)
    values = [p.value for p in points]
    max_value = max(values)
    min_value = min(values)

    return Metrics(
        cost=net_cost(legs),
        max_profit=UNBOUNDED if max_value > threshold or right_slope > 0 else max_value,
        max_loss=UNBOUNDED if min_value < -threshold or right_slope < 0 else min_value,
        breakevens=find_breakevens(points, decimals),
        method=BoundaryMethod.SAMPLED,
    )


def tail_slopes(legs: Iterable[OptionLeg]) -> tuple[float, float]:
    """Payoff slope below the lowest strike and above the highest strike."""
    left = 0.0
    right = 0.0
    for leg in legs:
        signed_qty = leg.action.sign * leg.quantity
        if leg.option_type == OptionType.CALL:
            right += signed_qty
        else:
            left -= signed_qty
    return left, right


def _right_slope(legs: Iterable[OptionLeg]) -> float:
    _, right = tail_slopes(legs)
    # offsetting fractional quantities may not cancel exactly
    return 0.0 if math.isclose(right, 0.0, abs_tol=_SLOPE_TOL) else right


def exact_breakevens(
    legs: Iterable[OptionLeg],
    lower: float,
    upper: float,
    decimals: int = BREAKEVEN_DECIMALS,
) -> tuple[float, ...]:
    """Exact zero crossings of the piecewise-linear payoff inside `(lower, upper)`.

    Only sign changes count; a curve that touches zero and turns back is not
    a breakeven. When the curve sits on zero over a flat segment before
    changing sign, the first zero price is reported.
    """
    legs = tuple(legs)
    knots = sorted({lower, upper, *(leg.strike for leg in legs if lower < leg.strike < upper)})
    values = [payoff_at(legs, x) for x in knots]

    roots: list[float] = []
    prev: tuple[float, float] | None = None
    zero_start: float | None = None
    for i, (x, v) in enumerate(zip(knots, values)):
        if v == 0:
            if zero_start is None:
                zero_start = x
            continue
        if prev is not None and (prev[1] > 0) != (v > 0):
            if zero_start is not None:
                roots.append(zero_start)
            else:
                x0, v0 = knots[i - 1], values[i - 1]
                roots.append(x0 - v0 * (x - x0) / (v - v0))
        prev = (x, v)
        zero_start = None

    rounded = (round(r, decimals) for r in roots)
    return tuple(r for r in rounded if lower < r < upper)


def compute_metrics_analytic(
    legs: Iterable[OptionLeg],
    window: PriceWindow,
    *,
    decimals: int = BREAKEVEN_DECIMALS,
) -> Metrics:
    """Exact metrics from the piecewise-linear payoff.

    Spot is bounded below by zero, so only the right tail can run away.
    """
    legs = tuple(legs)
    right_slope = _right_slope(legs)

    candidates = sorted({0.0, *(leg.strike for leg in legs)})
    values = [payoff_at(legs, x) for x in candidates]

    return Metrics(
        cost=net_cost(legs),
        max_profit=UNBOUNDED if right_slope > 0 else max(values),
        max_loss=UNBOUNDED if right_slope < 0 else min(values),
        breakevens=exact_breakevens(legs, window.lower, window.upper, decimals),
        method=BoundaryMethod.ANALYTIC,
    )
