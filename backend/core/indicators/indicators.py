"""Incremental technical indicators.

Every indicator does constant work per observation (MVar is linear in
its window) and reports NaN until it has seen enough data:

- SMA(window): first value on update ``window``
- EMA(period): first value on update ``period``
- MVar(window, dof): first value on update ``window``
- RSI(period): first value on bar ``period``
- MACD(short, long, signal): line from update ``max(short, long) + 1``,
  signal line ``signal - 1`` updates later

A NaN input poisons running sums for good, the same way it does in any
IEEE-754 accumulator; sources are expected to drop such rows.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from core.indicators.base import RingBuffer, is_nan, require_period
from core.models.record import OhlcvRecord


class SMA:
    """Simple Moving Average over a fixed window.

    Keeps a running sum: once the window is full, the value about to
    be evicted is subtracted and the new one added. The sum is never
    recomputed from the buffer.
    """

    def __init__(self, window: int):
        self.window = require_period("window", window)
        self._buffer = RingBuffer(self.window)
        self._sum = 0.0
        self._value = math.nan

    @property
    def is_ready(self) -> bool:
        return self._buffer.is_full

    def get(self) -> float:
        return self._value

    def update(self, value: float) -> float:
        if self._buffer.is_full:
            self._sum -= self._buffer.oldest()
        self._buffer.push(value)
        self._sum += value
        self._value = self._sum / self.window if self._buffer.is_full else math.nan
        return self._value


class EMA:
    """Exponential Moving Average.

    alpha = smoothing / (period + 1). The recurrence is seeded with the
    arithmetic mean of the first ``period`` values:

        EMA_t = value_t * alpha + EMA_{t-1} * (1 - alpha)
    """

    def __init__(self, period: int, smoothing: float = 2.0):
        self.period = require_period("period", period)
        if not smoothing > 0:
            raise ValueError(f"smoothing must be > 0, got {smoothing}")
        self.smoothing = float(smoothing)
        self.alpha = self.smoothing / (self.period + 1.0)
        self._count = 0
        self._ema = 0.0
        self._value = math.nan

    @property
    def is_ready(self) -> bool:
        return self._count >= self.period

    def get(self) -> float:
        return self._value

    def update(self, value: float) -> float:
        self._count += 1
        if self._count < self.period:
            self._ema += value
            self._value = math.nan
        elif self._count == self.period:
            self._ema = (self._ema + value) / self.period
            self._value = self._ema
        else:
            self._ema = value * self.alpha + self._ema * (1.0 - self.alpha)
            self._value = self._ema
        return self._value


class MVar:
    """Moving variance of the last ``window`` values.

    Variance = sum((x_i - mean)^2) / (window - dof), where dof is 0 for
    population variance and 1 for sample variance.
    """

    def __init__(self, window: int, dof: int = 0):
        self.window = require_period("window", window)
        if dof < 0 or dof >= self.window:
            raise ValueError(
                f"dof must satisfy 0 <= dof < window ({self.window}), got {dof}"
            )
        self.dof = int(dof)
        self._sma = SMA(self.window)
        self._buffer = RingBuffer(self.window)
        self._value = math.nan

    @property
    def is_ready(self) -> bool:
        return self._buffer.is_full

    def get(self) -> float:
        return self._value

    def update(self, value: float) -> float:
        self._buffer.push(value)
        mean = self._sma.update(value)
        if not self._buffer.is_full:
            self._value = math.nan
            return self._value
        deviations = self._buffer.values() - mean
        self._value = float(np.dot(deviations, deviations)) / (self.window - self.dof)
        return self._value


class RSI:
    """Relative Strength Index over OHLCV bars.

    Gains and losses are the positive part and the absolute negative
    part of each bar's close - open, averaged with two SMA(period):

        RSI = 100 - 100 / (1 + avg_gain / avg_loss)

    A window with no losses and some gain is the +inf limit of the
    ratio and yields exactly 100.0. A window with neither (0/0) has no
    defined strength and yields NaN.
    """

    def __init__(self, period: int = 14):
        self.period = require_period("period", period)
        self._gains = SMA(self.period)
        self._losses = SMA(self.period)
        self._value = math.nan

    @property
    def is_ready(self) -> bool:
        return self._losses.is_ready

    def get(self) -> float:
        return self._value

    def update(self, bar: OhlcvRecord) -> float:
        diff = bar.close - bar.open
        avg_gain = self._gains.update(diff if diff > 0.0 else 0.0)
        avg_loss = self._losses.update(-diff if diff < 0.0 else 0.0)

        if not self._losses.is_ready:
            self._value = math.nan
        elif avg_loss == 0.0:
            self._value = 100.0 if avg_gain > 0.0 else math.nan
        else:
            self._value = 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)
        return self._value


@dataclass(frozen=True, slots=True)
class MacdResult:
    """MACD line, signal line, and histogram (line - signal)."""

    macd: float
    signal: float
    histogram: float

    @property
    def is_ready(self) -> bool:
        """Check if both the line and the signal line are available."""
        return not (is_nan(self.macd) or is_nan(self.signal))


MACD_UNAVAILABLE = MacdResult(math.nan, math.nan, math.nan)


class MACD:
    """Moving Average Convergence Divergence.

    The MACD line (short EMA - long EMA) is only produced once the
    update count exceeds max(short_period, long_period). The signal
    line EMA starts accumulating from that point, so its warm-up is
    counted from the first line value, not from the first input.
    """

    def __init__(
        self,
        short_period: int,
        long_period: int,
        signal_period: int,
        smoothing: float = 2.0,
    ):
        self._short_ema = EMA(short_period, smoothing)
        self._long_ema = EMA(long_period, smoothing)
        self._signal_ema = EMA(signal_period, smoothing)
        self._start = max(self._short_ema.period, self._long_ema.period)
        self._count = 0
        self._value = MACD_UNAVAILABLE

    @property
    def is_ready(self) -> bool:
        return self._value.is_ready

    def get(self) -> MacdResult:
        return self._value

    def update(self, value: float) -> MacdResult:
        self._count += 1
        short_value = self._short_ema.update(value)
        long_value = self._long_ema.update(value)
        if self._count <= self._start:
            return self._value

        line = short_value - long_value
        signal = self._signal_ema.update(line)
        self._value = MacdResult(macd=line, signal=signal, histogram=line - signal)
        return self._value
