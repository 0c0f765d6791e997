"""Moving-average crossover strategy implementation.

Trend-following on a single value series:
- Short average above long * (1 + threshold) -> BUY
- Short average below long * (1 - threshold) -> SELL

This module is pure business logic with no I/O dependencies.
"""

import logging

from core.indicators import EMA, SMA, is_nan
from core.models import DataKind, Side, Signal, SingleValueRecord
from core.strategy.crossover.models import CROSSOVER_STRATEGY_NAME, CrossoverConfig
from core.strategy.protocol import SideLatch
from core.strategy.registry import register_strategy

logger = logging.getLogger(__name__)


@register_strategy(CROSSOVER_STRATEGY_NAME)
class CrossoverStrategy:
    """Short/long moving-average crossover.

    Signal Logic:
    - BUY: short average rises above the long average plus threshold
    - SELL: short average falls below the long average minus threshold
    - HOLD: until both averages are available, and whenever the side
      would repeat the last emitted one
    """

    config_class = CrossoverConfig

    def __init__(self, config: CrossoverConfig | None = None):
        self.config = config or CrossoverConfig()
        self.threshold = self.config.threshold
        self._short_ma = self._make_average(self.config.short_period)
        self._long_ma = self._make_average(self.config.long_period)
        self._latch = SideLatch()

    def _make_average(self, period: int) -> SMA | EMA:
        if self.config.average == "ema":
            return EMA(period, self.config.smoothing)
        return SMA(period)

    # ------------------------------------------------------------------
    # Strategy Protocol properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return CROSSOVER_STRATEGY_NAME

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def required_data_kind(self) -> DataKind:
        return DataKind.SINGLE_VALUE

    @property
    def last_side(self) -> Side:
        return self._latch.last_side

    # ------------------------------------------------------------------
    # Core logic
    # ------------------------------------------------------------------

    def update(self, record: SingleValueRecord) -> Signal:
        short_value = self._short_ma.update(record.value)
        long_value = self._long_ma.update(record.value)

        # Always HOLD until both averages have warmed up
        if is_nan(short_value) or is_nan(long_value):
            return Signal(timestamp=record.timestamp, side=Side.HOLD, price=record.value)

        side = self._latch.decide(
            buy=short_value > long_value * (1.0 + self.threshold),
            sell=short_value < long_value * (1.0 - self.threshold),
        )
        if side != Side.HOLD:
            logger.debug(
                f"Crossover {side.value.upper()} @ {record.value} "
                f"short={short_value:.6g} long={long_value:.6g} ts={record.timestamp}"
            )
        return Signal(timestamp=record.timestamp, side=side, price=record.value)
