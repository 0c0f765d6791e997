"""Trading signal model."""

from dataclasses import dataclass
from enum import Enum


class Side(str, Enum):
    """Trade decision."""

    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


@dataclass(slots=True)
class Signal:
    """Decision emitted by a strategy for one input record.

    ``volume`` is a unit-of-account weight; the portfolio sizes orders
    from available cash and does not read it.
    """

    timestamp: int
    side: Side
    price: float
    volume: float = 1.0

    @property
    def is_hold(self) -> bool:
        """Check if this signal carries no trading action."""
        return self.side == Side.HOLD
