"""Backtesting system for signal strategies.

Only depends on core/ for business logic: records flow from a source
through a strategy into a simulated single-asset portfolio.

Usage:
    python -m backtest --strategy crossover --input prices.csv
    python -m backtest --list
"""

from backtest.engine import BacktestEngine, EngineResult
from backtest.portfolio import Portfolio, PortfolioState
from backtest.runner import BacktestConfig, BacktestResult, BacktestRunner

__all__ = [
    "BacktestConfig",
    "BacktestEngine",
    "BacktestResult",
    "BacktestRunner",
    "EngineResult",
    "Portfolio",
    "PortfolioState",
]
