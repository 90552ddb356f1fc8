"""Exception hierarchy raised by the payoff engine."""

from __future__ import annotations

from typing import Any


class PayoffError(Exception):
    """Base class for all payoff-engine errors."""


class LegValidationError(PayoffError, ValueError):
    """Raised when an option leg is built from invalid values.

    `field` names the offending attribute and `index` (when known) is the
    position of the leg inside its strategy.
    """

    def __init__(
        self,
        field: str,
        value: Any,
        reason: str,
        *,
        index: int | None = None,
    ) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        self.index = index
        super().__init__(self._render())

    def _render(self) -> str:
        where = f"leg[{self.index}]." if self.index is not None else ""
        return f"{where}{self.field} {self.reason} (got {self.value!r})"

    def at_index(self, index: int) -> LegValidationError:
        """Return a copy of this error bound to a leg position."""
        return LegValidationError(self.field, self.value, self.reason, index=index)


class PriceRangeError(PayoffError, ValueError):
    """Raised for zero-width, inverted or otherwise unusable price ranges."""
