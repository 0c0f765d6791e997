"""Tests for record, signal and ledger models."""

import math

import pytest
from pydantic import ValidationError

from core.models import (
    RECORD_TYPES,
    DataKind,
    EquityPoint,
    OhlcvField,
    OhlcvRecord,
    Position,
    Side,
    Signal,
    SingleValueRecord,
    TickRecord,
)


def make_bar(**overrides) -> OhlcvRecord:
    values = dict(timestamp=1_700_000_000, open=100.0, high=110.0, low=95.0, close=105.0, volume=12.5)
    values.update(overrides)
    return OhlcvRecord(**values)


class TestOhlcvRecord:
    def test_get_field(self):
        bar = make_bar()
        assert bar.get_field(OhlcvField.OPEN) == 100.0
        assert bar.get_field(OhlcvField.HIGH) == 110.0
        assert bar.get_field(OhlcvField.LOW) == 95.0
        assert bar.get_field(OhlcvField.CLOSE) == 105.0
        assert bar.get_field(OhlcvField.VOLUME) == 12.5

    def test_derived_prices(self):
        bar = make_bar()
        assert bar.typical_price == pytest.approx((110.0 + 95.0 + 105.0) / 3)
        assert bar.median_price == pytest.approx(102.5)
        assert bar.weighted_close == pytest.approx((110.0 + 95.0 + 210.0) / 4)
        assert bar.is_bullish
        assert not bar.is_bearish

    def test_frozen(self):
        bar = make_bar()
        with pytest.raises(ValidationError):
            bar.close = 1.0

    def test_rejects_nan(self):
        with pytest.raises(ValidationError):
            make_bar(close=math.nan)

    def test_coerces_strings(self):
        bar = OhlcvRecord.model_validate(
            {"timestamp": "60", "open": "1", "high": "2", "low": "0.5", "close": "1.5", "volume": "3"}
        )
        assert bar.timestamp == 60
        assert bar.close == 1.5


class TestRecordKinds:
    def test_kind_is_class_level(self):
        assert OhlcvRecord.kind == DataKind.OHLCV
        assert TickRecord.kind == DataKind.TICK
        assert SingleValueRecord.kind == DataKind.SINGLE_VALUE
        assert SingleValueRecord(timestamp=1, value=2.0).kind == DataKind.SINGLE_VALUE

    def test_kind_not_serialized(self):
        assert SingleValueRecord(timestamp=1, value=2.0).model_dump() == {"timestamp": 1, "value": 2.0}

    def test_record_types_cover_every_kind(self):
        assert set(RECORD_TYPES) == set(DataKind)
        for kind, cls in RECORD_TYPES.items():
            assert cls.kind == kind

    def test_tick_side_defaults_to_hold(self):
        tick = TickRecord(timestamp=1, price=10.0, volume=0.5)
        assert tick.side == Side.HOLD


class TestSignal:
    def test_defaults(self):
        signal = Signal(timestamp=5, side=Side.BUY, price=10.0)
        assert signal.volume == 1.0
        assert not signal.is_hold
        assert Signal(timestamp=5, side=Side.HOLD, price=10.0).is_hold

    def test_side_values(self):
        assert Side("buy") is Side.BUY
        assert Side.SELL.value == "sell"


class TestLedger:
    def test_position_values(self):
        position = Position(open_timestamp=0, quantity=4.0, acquisition_price=25.0)
        assert position.cost_basis == 100.0
        assert position.market_value(30.0) == 120.0

    def test_equity_point_frozen(self):
        point = EquityPoint(timestamp=0, value=1.0)
        with pytest.raises(AttributeError):
            point.value = 2.0
