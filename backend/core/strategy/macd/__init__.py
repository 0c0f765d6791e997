"""MACD strategy package (registers "macd" on import)."""

from core.strategy.macd.generator import MacdStrategy
from core.strategy.macd.models import MACD_STRATEGY_NAME, MacdConfig

__all__ = [
    "MacdStrategy",
    "MacdConfig",
    "MACD_STRATEGY_NAME",
]
