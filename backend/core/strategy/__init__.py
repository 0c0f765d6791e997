"""Strategy plugin system.

Public API:
- Strategy: Protocol that all strategies must implement
- SideLatch: Hysteresis state shared by the built-in strategies
- register_strategy: Decorator to register a strategy class
- create_strategy: Factory function to instantiate strategies by name
- create_strategy_from_params: Factory that validates raw parameters first
- list_strategies: Discover all registered strategies
- describe_strategies: Name, version, data kind and defaults per strategy
- get_strategy_class: Get strategy class by name without instantiating

Importing this package auto-registers all built-in strategies.
"""

from core.strategy.protocol import SideLatch, Strategy
from core.strategy.registry import (
    create_strategy,
    create_strategy_from_params,
    describe_strategies,
    get_strategy_class,
    list_strategies,
    register_strategy,
)

# Import built-in strategies to trigger auto-registration
import core.strategy.crossover  # noqa: F401
import core.strategy.macd  # noqa: F401
import core.strategy.rsi  # noqa: F401

__all__ = [
    "Strategy",
    "SideLatch",
    "register_strategy",
    "create_strategy",
    "create_strategy_from_params",
    "describe_strategies",
    "list_strategies",
    "get_strategy_class",
]
