"""Strategy registry for discovering and instantiating strategies.

Usage:
    @register_strategy("my_strategy")
    class MyStrategy:
        config_class = MyConfig
        ...

    strategy = create_strategy("my_strategy", config=MyConfig())
    strategy = create_strategy_from_params("my_strategy", {"period": "9"})
    for info in describe_strategies():
        print(info.name, info.data_kind, info.defaults)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from core.models.record import DataKind

logger = logging.getLogger(__name__)

# strategy_name -> strategy_class
_REGISTRY: dict[str, type] = {}


@dataclass(frozen=True)
class StrategyInfo:
    """Registry entry summary for listings."""

    name: str
    version: str
    data_kind: DataKind
    defaults: dict[str, Any]


def register_strategy(name: str):
    """Decorator to register a strategy class under a given name.

    The class must expose its pydantic config model as ``config_class``
    and accept ``config=None`` to run with defaults.

    Raises:
        ValueError: If the name is taken or the class has no config_class.
    """

    def decorator(cls):
        if name in _REGISTRY:
            raise ValueError(
                f"Strategy '{name}' is already registered by {_REGISTRY[name].__name__}"
            )
        if not hasattr(cls, "config_class"):
            raise ValueError(f"Strategy class {cls.__name__} has no config_class")
        _REGISTRY[name] = cls
        logger.debug("Registered strategy: %s -> %s", name, cls.__name__)
        return cls

    return decorator


def get_strategy_class(name: str) -> type:
    """Look up a registered class.

    Raises:
        KeyError: If no strategy is registered under the given name.
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        available = ", ".join(sorted(_REGISTRY)) or "(none)"
        raise KeyError(f"Unknown strategy '{name}'. Available: {available}") from None


def create_strategy(name: str, **kwargs: Any):
    """Instantiate a strategy by name, passing kwargs to its constructor."""
    return get_strategy_class(name)(**kwargs)


def create_strategy_from_params(name: str, params: dict[str, Any] | None = None):
    """Instantiate a strategy from raw (e.g. CLI string) parameters.

    Raises:
        KeyError: Unknown strategy name.
        pydantic.ValidationError: Parameters rejected by the config model.
    """
    cls = get_strategy_class(name)
    config = cls.config_class.model_validate(params or {})
    return cls(config=config)


def describe_strategies() -> list[StrategyInfo]:
    """Summaries of every registered strategy, sorted by name."""
    infos = []
    for name in list_strategies():
        strategy = _REGISTRY[name]()
        infos.append(
            StrategyInfo(
                name=name,
                version=strategy.version,
                data_kind=strategy.required_data_kind,
                defaults=strategy.config.model_dump(mode="json"),
            )
        )
    return infos


def list_strategies() -> list[str]:
    """Return a sorted list of registered strategy names."""
    return sorted(_REGISTRY.keys())
