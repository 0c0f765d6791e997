"""Market data record models.

Records are immutable once parsed. Each record type carries its
``DataKind`` capability tag so the engine can check that a source and
a strategy agree on the shape of the data before any record flows.
"""

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from core.models.signal import Side


class DataKind(str, Enum):
    """Shape of the records a source produces or a strategy consumes."""

    OHLCV = "ohlcv"
    TICK = "tick"
    SINGLE_VALUE = "single_value"


class OhlcvField(str, Enum):
    """Selector for one series of an OHLCV bar."""

    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    CLOSE = "close"
    VOLUME = "volume"


class OhlcvRecord(BaseModel):
    """OHLCV bar (candlestick) record."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    kind: ClassVar[DataKind] = DataKind.OHLCV

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    def get_field(self, field: OhlcvField) -> float:
        """Return the value of the selected series."""
        return getattr(self, field.value)

    @property
    def typical_price(self) -> float:
        """(high + low + close) / 3."""
        return (self.high + self.low + self.close) / 3.0

    @property
    def median_price(self) -> float:
        """(high + low) / 2."""
        return (self.high + self.low) / 2.0

    @property
    def weighted_close(self) -> float:
        """(high + low + 2 * close) / 4."""
        return (self.high + self.low + 2.0 * self.close) / 4.0

    @property
    def is_bullish(self) -> bool:
        """Check if this is a bullish (green) candle."""
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        """Check if this is a bearish (red) candle."""
        return self.close < self.open


class TickRecord(BaseModel):
    """Single trade print."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    kind: ClassVar[DataKind] = DataKind.TICK

    timestamp: int
    price: float
    volume: float
    side: Side = Side.HOLD  # aggressor side, HOLD when unknown


class SingleValueRecord(BaseModel):
    """One scalar observation, e.g. a close price series."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    kind: ClassVar[DataKind] = DataKind.SINGLE_VALUE

    timestamp: int
    value: float


Record = OhlcvRecord | TickRecord | SingleValueRecord

RECORD_TYPES: dict[DataKind, type[BaseModel]] = {
    DataKind.OHLCV: OhlcvRecord,
    DataKind.TICK: TickRecord,
    DataKind.SINGLE_VALUE: SingleValueRecord,
}
