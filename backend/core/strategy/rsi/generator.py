"""RSI overbought/oversold strategy implementation.

Mean-reversion on OHLCV bars:
- RSI below the oversold level -> BUY
- RSI above the overbought level -> SELL
- Anything inside the neutral band -> HOLD
"""

import logging

from core.indicators import RSI, is_nan
from core.models import DataKind, OhlcvRecord, Side, Signal
from core.strategy.protocol import SideLatch
from core.strategy.registry import register_strategy
from core.strategy.rsi.models import RSI_STRATEGY_NAME, RsiConfig

logger = logging.getLogger(__name__)


@register_strategy(RSI_STRATEGY_NAME)
class RsiStrategy:
    """Relative Strength Index threshold strategy.

    The RSI is computed from each bar's close - open; ``config.field``
    only selects which price the emitted signal quotes.
    """

    config_class = RsiConfig

    def __init__(self, config: RsiConfig | None = None):
        self.config = config or RsiConfig()
        self._rsi = RSI(self.config.period)
        self._latch = SideLatch()

    @property
    def name(self) -> str:
        return RSI_STRATEGY_NAME

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def required_data_kind(self) -> DataKind:
        return DataKind.OHLCV

    @property
    def last_side(self) -> Side:
        return self._latch.last_side

    def update(self, record: OhlcvRecord) -> Signal:
        rsi_value = self._rsi.update(record)
        price = record.get_field(self.config.field)

        if is_nan(rsi_value):
            return Signal(timestamp=record.timestamp, side=Side.HOLD, price=price)

        side = self._latch.decide(
            buy=rsi_value < self.config.oversold,
            sell=rsi_value > self.config.overbought,
        )
        if side != Side.HOLD:
            logger.debug(
                f"RSI {side.value.upper()} @ {price} rsi={rsi_value:.2f} ts={record.timestamp}"
            )
        return Signal(timestamp=record.timestamp, side=side, price=price)
