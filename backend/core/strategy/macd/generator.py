"""MACD signal-line strategy implementation.

- MACD line above signal * (1 + threshold) -> BUY
- MACD line below signal * (1 - threshold) -> SELL

The threshold scales the signal line itself, so with a negative signal
line the band is mirrored.
"""

import logging

from core.indicators import MACD
from core.models import DataKind, Side, Signal, SingleValueRecord
from core.strategy.macd.models import MACD_STRATEGY_NAME, MacdConfig
from core.strategy.protocol import SideLatch
from core.strategy.registry import register_strategy

logger = logging.getLogger(__name__)


@register_strategy(MACD_STRATEGY_NAME)
class MacdStrategy:
    """Trade MACD line / signal line crosses on a single value series."""

    config_class = MacdConfig

    def __init__(self, config: MacdConfig | None = None):
        self.config = config or MacdConfig()
        self.threshold = self.config.threshold
        self._macd = MACD(
            self.config.short_period,
            self.config.long_period,
            self.config.signal_period,
            self.config.smoothing,
        )
        self._latch = SideLatch()

    @property
    def name(self) -> str:
        return MACD_STRATEGY_NAME

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def required_data_kind(self) -> DataKind:
        return DataKind.SINGLE_VALUE

    @property
    def last_side(self) -> Side:
        return self._latch.last_side

    def update(self, record: SingleValueRecord) -> Signal:
        result = self._macd.update(record.value)
        if not result.is_ready:
            return Signal(timestamp=record.timestamp, side=Side.HOLD, price=record.value)

        side = self._latch.decide(
            buy=result.macd > result.signal * (1.0 + self.threshold),
            sell=result.macd < result.signal * (1.0 - self.threshold),
        )
        if side != Side.HOLD:
            logger.debug(
                f"MACD {side.value.upper()} @ {record.value} "
                f"line={result.macd:.6g} signal={result.signal:.6g} ts={record.timestamp}"
            )
        return Signal(timestamp=record.timestamp, side=side, price=record.value)
