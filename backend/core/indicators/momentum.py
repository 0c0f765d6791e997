"""Lookback momentum indicators: Rate of Change and Momentum.

Both compare the newest value with the one seen ``period`` updates
earlier, so the first output arrives on update ``period + 1``.
"""

from __future__ import annotations

import math

from core.indicators.base import RingBuffer, require_period


class _Lookback:
    def __init__(self, period: int):
        self.period = require_period("period", period)
        self._buffer = RingBuffer(self.period)
        self._value = math.nan

    def get(self) -> float:
        return self._value

    def _shift(self, value: float) -> float:
        """Push value and return the one from ``period`` updates ago."""
        old = self._buffer.oldest()
        self._buffer.push(value)
        return old


class ROC(_Lookback):
    """Percentage change versus ``period`` updates ago (NaN if that was 0)."""

    def update(self, value: float) -> float:
        old = self._shift(value)
        if math.isnan(old) or old == 0.0:
            self._value = math.nan
        else:
            self._value = (value - old) / old * 100.0
        return self._value


class Momentum(_Lookback):
    """Absolute change versus ``period`` updates ago."""

    def update(self, value: float) -> float:
        old = self._shift(value)
        self._value = value - old
        return self._value
