"""Shared building blocks for incremental indicators."""

from __future__ import annotations

import math
from typing import Any, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class Indicator(Protocol):
    """Protocol that all incremental indicators implement.

    ``update`` consumes one observation and returns the new output;
    ``get`` returns the last output without side effects. Outputs are
    NaN (or a result of NaNs) until the indicator has warmed up.
    Indicators cannot be rewound or reset; build a fresh one instead.
    """

    def update(self, value: Any) -> Any:
        ...

    def get(self) -> Any:
        ...


def require_period(name: str, value: int) -> int:
    """Validate a window/period argument at construction time."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return int(value)


def is_nan(value: Any) -> bool:
    """Check if a value is missing (None or NaN)."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


class RingBuffer:
    """Fixed-capacity circular buffer of float64 values.

    Capacity is set at construction; pushing into a full buffer
    overwrites the oldest value.
    """

    __slots__ = ("_data", "_pos", "_len")

    def __init__(self, capacity: int):
        capacity = require_period("capacity", capacity)
        self._data = np.full(capacity, np.nan, dtype=np.float64)
        self._pos = 0
        self._len = 0

    @property
    def capacity(self) -> int:
        return self._data.shape[0]

    @property
    def is_full(self) -> bool:
        return self._len == self._data.shape[0]

    def __len__(self) -> int:
        return self._len

    def oldest(self) -> float:
        """Return the value the next push will evict (NaN while filling)."""
        if not self.is_full:
            return math.nan
        return float(self._data[self._pos])

    def push(self, value: float) -> None:
        """Store a value, evicting the oldest one once full."""
        self._data[self._pos] = value
        self._pos = (self._pos + 1) % self._data.shape[0]
        if self._len < self._data.shape[0]:
            self._len += 1

    def values(self) -> np.ndarray:
        """Return the stored values oldest-first (a copy)."""
        if not self.is_full:
            return self._data[: self._len].copy()
        return np.concatenate((self._data[self._pos :], self._data[: self._pos]))
