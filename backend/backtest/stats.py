"""Performance statistics for a simulated equity curve.

All functions are pure: they read an append-only, time-ordered list of
EquityPoint values and never mutate it.

Conventions:
- A year is 365 days of 86,400 seconds.
- Annualization needs at least 30 days of history; shorter curves
  report ``annualized_return=None`` rather than an extrapolated figure.
- Sharpe assumes a zero risk-free rate and uses the population standard
  deviation of per-point returns, scaled by sqrt(points per year).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from core.models.ledger import EquityPoint

logger = logging.getLogger(__name__)

SECONDS_PER_YEAR = 365 * 24 * 3600
MIN_ANNUALIZATION_YEARS = 30 / 365


@dataclass
class PerformanceMetrics:
    """Return and risk figures derived from an equity curve."""

    start_timestamp: int
    end_timestamp: int
    start_value: float
    end_value: float
    num_points: int
    elapsed_years: float
    total_return: float
    annualized_return: float | None
    max_drawdown: float
    sharpe_ratio: float


@dataclass
class BuyAndHoldResult:
    """Outcome of buying at the first price and holding to the last."""

    quantity: float
    leftover_cash: float
    final_value: float
    total_return: float
    annualized_return: float | None


def elapsed_years(
    start_timestamp: int, end_timestamp: int, timestamp_unit_seconds: float = 1.0
) -> float:
    """Convert a timestamp span to years."""
    seconds = (end_timestamp - start_timestamp) * timestamp_unit_seconds
    return seconds / SECONDS_PER_YEAR


def annualize(growth: float, years: float) -> float | None:
    """Compound growth factor to a yearly rate, or None below 30 days."""
    if years < MIN_ANNUALIZATION_YEARS:
        return None
    return growth ** (1.0 / years) - 1.0


class StatisticsCalculator:
    """Calculate performance metrics from an equity curve."""

    def __init__(self, timestamp_unit_seconds: float = 1.0):
        self.timestamp_unit_seconds = timestamp_unit_seconds

    def calculate(self, curve: Sequence[EquityPoint]) -> PerformanceMetrics:
        if not curve:
            raise ValueError("equity curve must contain at least one point")

        values = np.fromiter((p.value for p in curve), dtype=np.float64, count=len(curve))
        first, last = curve[0], curve[-1]
        years = elapsed_years(first.timestamp, last.timestamp, self.timestamp_unit_seconds)
        growth = last.value / first.value
        if years < MIN_ANNUALIZATION_YEARS:
            logger.debug(
                "Equity curve spans %.1f days; annualized return unavailable",
                years * 365,
            )

        return PerformanceMetrics(
            start_timestamp=first.timestamp,
            end_timestamp=last.timestamp,
            start_value=first.value,
            end_value=last.value,
            num_points=len(curve),
            elapsed_years=years,
            total_return=growth - 1.0,
            annualized_return=annualize(growth, years),
            max_drawdown=self._calc_max_drawdown(values),
            sharpe_ratio=self._calc_sharpe(values, years),
        )

    def buy_and_hold(
        self,
        initial_cash: float,
        init_price: float,
        init_timestamp: int,
        last_price: float,
        last_timestamp: int,
    ) -> BuyAndHoldResult:
        """Compare against spending all cash on whole units at the first price."""
        quantity = float(math.floor(initial_cash / init_price))
        leftover = initial_cash - quantity * init_price
        final_value = quantity * last_price + leftover
        growth = final_value / initial_cash
        years = elapsed_years(init_timestamp, last_timestamp, self.timestamp_unit_seconds)
        return BuyAndHoldResult(
            quantity=quantity,
            leftover_cash=leftover,
            final_value=final_value,
            total_return=growth - 1.0,
            annualized_return=annualize(growth, years),
        )

    @staticmethod
    def _calc_max_drawdown(values: np.ndarray) -> float:
        peaks = np.maximum.accumulate(values)
        with np.errstate(divide="ignore", invalid="ignore"):
            drawdowns = np.where(peaks > 0.0, (peaks - values) / peaks, 0.0)
        return float(drawdowns.max())

    @staticmethod
    def _calc_sharpe(values: np.ndarray, years: float) -> float:
        if values.shape[0] < 2 or years <= 0.0:
            return 0.0
        returns = values[1:] / values[:-1] - 1.0
        std = float(np.std(returns))
        if std == 0.0 or not math.isfinite(std):
            return 0.0
        samples_per_year = returns.shape[0] / years
        return float(np.mean(returns)) * math.sqrt(samples_per_year) / std


def calculate_metrics(
    curve: Sequence[EquityPoint], timestamp_unit_seconds: float = 1.0
) -> PerformanceMetrics:
    """Shortcut for ``StatisticsCalculator(unit).calculate(curve)``."""
    return StatisticsCalculator(timestamp_unit_seconds).calculate(curve)


def calculate_buy_and_hold(
    initial_cash: float,
    init_price: float,
    init_timestamp: int,
    last_price: float,
    last_timestamp: int,
    timestamp_unit_seconds: float = 1.0,
) -> BuyAndHoldResult:
    return StatisticsCalculator(timestamp_unit_seconds).buy_and_hold(
        initial_cash, init_price, init_timestamp, last_price, last_timestamp
    )
