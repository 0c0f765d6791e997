"""Tests for equity-curve performance statistics."""

import math

import numpy as np
import pytest

from core.models import EquityPoint
from backtest.stats import (
    MIN_ANNUALIZATION_YEARS,
    SECONDS_PER_YEAR,
    StatisticsCalculator,
    annualize,
    calculate_buy_and_hold,
    calculate_metrics,
    elapsed_years,
)

DAY = 86_400


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def make_curve(values: list[float], step: int = DAY, start: int = 0) -> list[EquityPoint]:
    """Build an equity curve with evenly spaced timestamps."""
    return [EquityPoint(start + i * step, v) for i, v in enumerate(values)]


class TestHelpers:
    def test_elapsed_years(self):
        assert elapsed_years(0, SECONDS_PER_YEAR) == pytest.approx(1.0)
        assert elapsed_years(0, SECONDS_PER_YEAR * 1000, 0.001) == pytest.approx(1.0)

    def test_annualize(self):
        assert annualize(1.21, 2.0) == pytest.approx(0.1)
        assert annualize(2.0, MIN_ANNUALIZATION_YEARS / 2) is None


class TestCalculate:
    def test_empty_curve_rejected(self):
        with pytest.raises(ValueError):
            calculate_metrics([])

    def test_single_point(self):
        m = calculate_metrics(make_curve([1000.0]))
        assert m.total_return == 0.0
        assert m.annualized_return is None
        assert m.max_drawdown == 0.0
        assert m.sharpe_ratio == 0.0
        assert m.num_points == 1

    def test_total_return(self):
        m = calculate_metrics(make_curve([100.0, 110.0, 150.0]))
        assert m.total_return == pytest.approx(0.5)
        assert m.start_value == 100.0
        assert m.end_value == 150.0

    def test_annualized_only_after_30_days(self):
        short = calculate_metrics(make_curve([100.0] * 29 + [110.0]))
        assert short.annualized_return is None

        curve = [EquityPoint(0, 100.0), EquityPoint(365 * DAY, 121.0), EquityPoint(730 * DAY, 121.0)]
        m = calculate_metrics(curve)
        assert m.elapsed_years == pytest.approx(2.0)
        assert m.annualized_return == pytest.approx(0.1)

    def test_max_drawdown(self):
        m = calculate_metrics(make_curve([100.0, 120.0, 90.0, 130.0, 104.0]))
        # Worst decline: 120 -> 90 = 25%
        assert m.max_drawdown == pytest.approx(0.25)

    def test_monotonic_curve_has_no_drawdown(self):
        m = calculate_metrics(make_curve([100.0, 101.0, 102.0]))
        assert m.max_drawdown == 0.0

    def test_sharpe_matches_formula(self):
        values = [100.0, 102.0, 101.0, 104.0, 103.5, 107.0]
        m = calculate_metrics(make_curve(values))
        returns = np.array(values[1:]) / np.array(values[:-1]) - 1.0
        years = 5 * DAY / SECONDS_PER_YEAR
        expected = returns.mean() * math.sqrt(len(returns) / years) / returns.std()
        assert m.sharpe_ratio == pytest.approx(expected)

    def test_sharpe_zero_for_constant_returns(self):
        m = calculate_metrics(make_curve([100.0, 100.0, 100.0]))
        assert m.sharpe_ratio == 0.0

    def test_sharpe_zero_without_elapsed_time(self):
        m = calculate_metrics([EquityPoint(5, 100.0), EquityPoint(5, 110.0)])
        assert m.sharpe_ratio == 0.0
        assert m.annualized_return is None

    def test_millisecond_timestamps(self):
        curve = make_curve([100.0, 110.0], step=365 * DAY * 1000)
        m = StatisticsCalculator(timestamp_unit_seconds=0.001).calculate(curve)
        assert m.elapsed_years == pytest.approx(1.0)
        assert m.annualized_return == pytest.approx(0.1)

    def test_curve_not_mutated(self):
        curve = make_curve([100.0, 90.0, 95.0])
        before = list(curve)
        calculate_metrics(curve)
        assert curve == before


class TestBuyAndHold:
    def test_whole_units_and_leftover(self):
        bh = calculate_buy_and_hold(1000.0, 30.0, 0, 36.0, DAY)
        assert bh.quantity == 33.0
        assert bh.leftover_cash == pytest.approx(10.0)
        assert bh.final_value == pytest.approx(33 * 36.0 + 10.0)
        assert bh.total_return == pytest.approx((33 * 36.0 + 10.0) / 1000.0 - 1.0)
        assert bh.annualized_return is None

    def test_annualized_over_a_year(self):
        bh = calculate_buy_and_hold(1000.0, 10.0, 0, 11.0, 365 * DAY)
        assert bh.total_return == pytest.approx(0.1)
        assert bh.annualized_return == pytest.approx(0.1)
