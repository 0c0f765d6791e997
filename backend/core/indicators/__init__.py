"""Technical indicators (pure math, no I/O)."""

from core.indicators.bands import (
    BOLLINGER_UNAVAILABLE,
    BollingerBands,
    BollingerResult,
    StdDev,
)
from core.indicators.base import Indicator, RingBuffer, is_nan
from core.indicators.indicators import (
    EMA,
    MACD,
    MACD_UNAVAILABLE,
    RSI,
    SMA,
    MacdResult,
    MVar,
)
from core.indicators.momentum import ROC, Momentum

__all__ = [
    "BOLLINGER_UNAVAILABLE",
    "BollingerBands",
    "BollingerResult",
    "EMA",
    "Indicator",
    "MACD",
    "MACD_UNAVAILABLE",
    "MVar",
    "MacdResult",
    "Momentum",
    "ROC",
    "RSI",
    "RingBuffer",
    "SMA",
    "StdDev",
    "is_nan",
]
