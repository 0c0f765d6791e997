"""Moving-average crossover strategy package.

Importing this package triggers strategy registration via the
@register_strategy decorator on CrossoverStrategy.
"""

from core.strategy.crossover.generator import CrossoverStrategy
from core.strategy.crossover.models import CROSSOVER_STRATEGY_NAME, CrossoverConfig

__all__ = [
    "CrossoverStrategy",
    "CrossoverConfig",
    "CROSSOVER_STRATEGY_NAME",
]
