"""Portfolio ledger models.

Plain slotted dataclasses with float values: one Position per buy fill
and one EquityPoint per processed record.
"""

from dataclasses import dataclass


@dataclass(slots=True)
class Position:
    """Open long position created by a single buy fill."""

    open_timestamp: int
    quantity: float
    acquisition_price: float

    @property
    def cost_basis(self) -> float:
        """Get quantity * acquisition price (commission excluded)."""
        return self.quantity * self.acquisition_price

    def market_value(self, price: float) -> float:
        """Mark the position to the given price."""
        return self.quantity * price


@dataclass(slots=True, frozen=True)
class EquityPoint:
    """Total account value at a point in time."""

    timestamp: int
    value: float
