"""Volatility indicators built on MVar: standard deviation and Bollinger Bands."""

from __future__ import annotations

import math
from dataclasses import dataclass

from core.indicators.indicators import SMA, MVar


class StdDev:
    """Moving standard deviation (square root of MVar)."""

    def __init__(self, window: int, dof: int = 0):
        self._mvar = MVar(window, dof)
        self.window = self._mvar.window
        self._value = math.nan

    def get(self) -> float:
        return self._value

    def update(self, value: float) -> float:
        variance = self._mvar.update(value)
        self._value = math.sqrt(variance) if not math.isnan(variance) else math.nan
        return self._value


@dataclass(frozen=True, slots=True)
class BollingerResult:
    upper: float
    middle: float
    lower: float

    @property
    def bandwidth(self) -> float:
        return self.upper - self.lower


BOLLINGER_UNAVAILABLE = BollingerResult(math.nan, math.nan, math.nan)


class BollingerBands:
    """SMA middle band with bands ``num_std`` deviations above and below."""

    def __init__(self, window: int = 20, num_std: float = 2.0, dof: int = 0):
        if num_std < 0:
            raise ValueError(f"num_std must be >= 0, got {num_std}")
        self.num_std = float(num_std)
        self._sma = SMA(window)
        self._std = StdDev(window, dof)
        self._value = BOLLINGER_UNAVAILABLE

    def get(self) -> BollingerResult:
        return self._value

    def update(self, value: float) -> BollingerResult:
        middle = self._sma.update(value)
        std = self._std.update(value)
        if math.isnan(middle) or math.isnan(std):
            self._value = BOLLINGER_UNAVAILABLE
            return self._value
        offset = std * self.num_std
        self._value = BollingerResult(
            upper=middle + offset, middle=middle, lower=middle - offset
        )
        return self._value
