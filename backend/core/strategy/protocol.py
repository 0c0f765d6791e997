"""Strategy protocol defining the interface all strategies must implement.

This module provides:
- Strategy: Runtime-checkable Protocol that strategies must satisfy
- SideLatch: the hysteresis state every strategy keeps
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.models.record import DataKind
from core.models.signal import Side, Signal


# ---------------------------------------------------------------------------
# Strategy Protocol
# ---------------------------------------------------------------------------
@runtime_checkable
class Strategy(Protocol):
    """Protocol that all trading strategies must implement.

    Strategies are responsible for:
    1. Feeding each record into their indicators
    2. Turning indicator readings into a Buy/Sell/Hold decision
    3. Suppressing repeated same-side signals (hysteresis)
    """

    @property
    def name(self) -> str:
        """Unique strategy identifier (e.g., 'crossover')."""
        ...

    @property
    def version(self) -> str:
        """Strategy version string (e.g., '1.0.0')."""
        ...

    @property
    def required_data_kind(self) -> DataKind:
        """Record shape this strategy consumes.

        The engine checks it against the record source before running.
        """
        ...

    def update(self, record: Any) -> Signal:
        """Process one record and return exactly one Signal.

        Args:
            record: A record of the kind named by ``required_data_kind``.

        Returns:
            Signal stamped with the record's timestamp. ``Side.HOLD``
            while indicators warm up or no new decision is made.
        """
        ...


# ---------------------------------------------------------------------------
# Hysteresis
# ---------------------------------------------------------------------------
class SideLatch:
    """Remembers the side of the last non-Hold signal emitted.

    A side is only emitted when it differs from the latched one, so a
    trend that keeps confirming the same direction after the initial
    cross produces a single signal.
    """

    __slots__ = ("last_side",)

    def __init__(self) -> None:
        self.last_side = Side.HOLD

    def decide(self, buy: bool, sell: bool) -> Side:
        """Resolve raw buy/sell conditions into a signal side."""
        if buy and self.last_side != Side.BUY:
            self.last_side = Side.BUY
            return Side.BUY
        if sell and self.last_side != Side.SELL:
            self.last_side = Side.SELL
            return Side.SELL
        return Side.HOLD
