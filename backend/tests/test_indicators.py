"""Tests for incremental technical indicators."""

import math

import numpy as np
import pytest

from core.indicators import (
    BollingerBands,
    EMA,
    Indicator,
    MACD,
    MVar,
    Momentum,
    ROC,
    RSI,
    RingBuffer,
    SMA,
    StdDev,
    is_nan,
)
from core.models import OhlcvRecord


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_bar(open_: float, close: float, ts: int = 0) -> OhlcvRecord:
    """Build a bar; only open and close matter for RSI."""
    return OhlcvRecord(
        timestamp=ts,
        open=open_,
        high=max(open_, close) + 1.0,
        low=min(open_, close) - 1.0,
        close=close,
        volume=10.0,
    )


def feed(indicator, values):
    return [indicator.update(v) for v in values]


class TestRingBuffer:
    def test_fills_then_evicts_oldest(self):
        buf = RingBuffer(3)
        for v in (1.0, 2.0):
            buf.push(v)
        assert len(buf) == 2
        assert not buf.is_full
        assert math.isnan(buf.oldest())

        buf.push(3.0)
        assert buf.is_full
        assert buf.oldest() == 1.0

        buf.push(4.0)
        assert list(buf.values()) == [2.0, 3.0, 4.0]
        assert buf.oldest() == 2.0

    def test_values_is_a_copy(self):
        buf = RingBuffer(2)
        buf.push(1.0)
        snapshot = buf.values()
        snapshot[0] = 99.0
        assert list(buf.values()) == [1.0]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            RingBuffer(0)


class TestSMA:
    def test_warmup_is_nan(self):
        out = feed(SMA(3), [1.0, 2.0, 3.0, 4.0])
        assert math.isnan(out[0])
        assert math.isnan(out[1])
        assert out[2] == pytest.approx(2.0)
        assert out[3] == pytest.approx(3.0)

    @pytest.mark.parametrize("window", [1, 2, 5, 17])
    def test_matches_brute_force(self, window):
        rng = np.random.default_rng(42)
        values = rng.normal(100.0, 5.0, size=200)
        sma = SMA(window)
        for i, v in enumerate(values):
            out = sma.update(float(v))
            if i < window - 1:
                assert math.isnan(out)
            else:
                expected = values[i - window + 1 : i + 1].mean()
                assert out == pytest.approx(expected, rel=1e-9)

    def test_get_has_no_side_effect(self):
        sma = SMA(2)
        sma.update(4.0)
        sma.update(6.0)
        assert sma.get() == 5.0
        assert sma.get() == 5.0
        assert sma.is_ready

    @pytest.mark.parametrize("window", [0, -3, 2.5, True])
    def test_invalid_window(self, window):
        with pytest.raises(ValueError):
            SMA(window)


class TestEMA:
    def test_seeded_with_mean(self):
        out = feed(EMA(3), [10.0, 20.0, 30.0, 40.0])
        assert math.isnan(out[0])
        assert math.isnan(out[1])
        assert out[2] == pytest.approx(20.0)
        # alpha = 2/4 = 0.5 -> 40*0.5 + 20*0.5
        assert out[3] == pytest.approx(30.0)

    def test_custom_smoothing(self):
        ema = EMA(3, smoothing=1.0)
        assert ema.alpha == pytest.approx(0.25)
        feed(ema, [10.0, 20.0, 30.0])
        assert ema.update(40.0) == pytest.approx(40.0 * 0.25 + 20.0 * 0.75)

    def test_period_one_tracks_input(self):
        ema = EMA(1)
        assert feed(ema, [5.0, 7.0]) == [5.0, 7.0]

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            EMA(0)
        with pytest.raises(ValueError):
            EMA(5, smoothing=0.0)


class TestMVar:
    def test_sample_variance(self):
        out = feed(MVar(3, dof=1), [10.0, 20.0, 30.0])
        assert math.isnan(out[0])
        assert math.isnan(out[1])
        assert out[2] == pytest.approx(100.0)

    def test_population_variance_matches_numpy(self):
        values = [3.0, 1.0, 4.0, 1.0, 5.0, 9.0, 2.0, 6.0]
        mvar = MVar(4)
        for i, v in enumerate(values):
            out = mvar.update(v)
            if i >= 3:
                assert out == pytest.approx(np.var(values[i - 3 : i + 1]))

    def test_dof_must_be_below_window(self):
        with pytest.raises(ValueError):
            MVar(3, dof=3)
        with pytest.raises(ValueError):
            MVar(3, dof=-1)


class TestRSI:
    def test_all_gains_is_100(self):
        rsi = RSI(3)
        out = [rsi.update(make_bar(10.0 + i, 11.0 + i)) for i in range(3)]
        assert math.isnan(out[0])
        assert math.isnan(out[1])
        assert out[2] == 100.0

    def test_all_losses_is_0(self):
        rsi = RSI(3)
        out = [rsi.update(make_bar(11.0 - i, 10.0 - i)) for i in range(3)]
        assert out[2] == pytest.approx(0.0)

    def test_flat_window_is_nan(self):
        rsi = RSI(2)
        rsi.update(make_bar(10.0, 10.0))
        assert math.isnan(rsi.update(make_bar(10.0, 10.0)))

    def test_mixed_window(self):
        rsi = RSI(2)
        rsi.update(make_bar(10.0, 13.0))  # gain 3
        value = rsi.update(make_bar(13.0, 12.0))  # loss 1
        # avg_gain 1.5, avg_loss 0.5 -> 100 - 100/4
        assert value == pytest.approx(75.0)
        assert rsi.is_ready


class TestMACD:
    def test_line_then_signal_warmup(self):
        macd = MACD(2, 3, 2)
        results = feed(macd, [1.0, 2.0, 3.0, 4.0, 5.0])

        for r in results[:3]:
            assert math.isnan(r.macd)
            assert not r.is_ready

        # Line available from update 4, signal EMA has only one value
        assert not math.isnan(results[3].macd)
        assert math.isnan(results[3].signal)
        assert math.isnan(results[3].histogram)

        assert results[4].is_ready
        assert results[4].histogram == pytest.approx(results[4].macd - results[4].signal)
        assert macd.get() is results[4]

    def test_line_matches_emas(self):
        short, long_ = EMA(2), EMA(3)
        macd = MACD(2, 3, 2)
        values = [5.0, 3.0, 8.0, 6.0, 7.0, 9.0]
        for v in values:
            result = macd.update(v)
            expected = short.update(v) - long_.update(v)
        assert result.macd == pytest.approx(expected)

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            MACD(0, 26, 9)


class TestBands:
    def test_stddev(self):
        std = StdDev(3, dof=1)
        out = feed(std, [10.0, 20.0, 30.0])
        assert math.isnan(out[1])
        assert out[2] == pytest.approx(10.0)

    def test_bollinger(self):
        bands = BollingerBands(window=3, num_std=2.0, dof=1)
        assert is_nan(bands.update(10.0).middle)
        bands.update(20.0)
        result = bands.update(30.0)
        assert result.middle == pytest.approx(20.0)
        assert result.upper == pytest.approx(40.0)
        assert result.lower == pytest.approx(0.0)
        assert result.bandwidth == pytest.approx(40.0)

    def test_negative_num_std(self):
        with pytest.raises(ValueError):
            BollingerBands(num_std=-1.0)


class TestMomentum:
    def test_roc(self):
        roc = ROC(2)
        out = feed(roc, [100.0, 105.0, 110.0, 99.0])
        assert math.isnan(out[0])
        assert math.isnan(out[1])
        assert out[2] == pytest.approx(10.0)
        assert out[3] == pytest.approx((99.0 - 105.0) / 105.0 * 100.0)

    def test_roc_zero_base_is_nan(self):
        roc = ROC(1)
        roc.update(0.0)
        assert math.isnan(roc.update(5.0))

    def test_momentum(self):
        mom = Momentum(1)
        assert math.isnan(mom.update(3.0))
        assert mom.update(7.5) == pytest.approx(4.5)


class TestProtocol:
    @pytest.mark.parametrize(
        "indicator",
        [SMA(2), EMA(2), MVar(2), RSI(2), MACD(2, 3, 2), StdDev(2), BollingerBands(2), ROC(2), Momentum(2)],
    )
    def test_satisfies_indicator_protocol(self, indicator):
        assert isinstance(indicator, Indicator)

    def test_is_nan(self):
        assert is_nan(None)
        assert is_nan(math.nan)
        assert is_nan(np.float64("nan"))
        assert not is_nan(0.0)
