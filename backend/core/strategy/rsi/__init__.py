"""RSI strategy package (registers "rsi" on import)."""

from core.strategy.rsi.generator import RsiStrategy
from core.strategy.rsi.models import RSI_STRATEGY_NAME, RsiConfig

__all__ = [
    "RsiStrategy",
    "RsiConfig",
    "RSI_STRATEGY_NAME",
]
