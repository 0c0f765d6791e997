"""Backtest-specific configuration.

Portfolio parameters are a validated pydantic model; their defaults can
be overridden through ``BACKTEST_*`` environment variables or a .env
file, and CLI flags override both.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PortfolioConfig(BaseModel):
    """Account and risk parameters for one simulated portfolio."""

    initial_cash: float = Field(default=100_000.0, gt=0.0)

    # Commission as a fraction of traded notional (0.001 = 0.1%)
    tx_cost_pct: float = Field(default=0.0, ge=0.0, lt=1.0)

    # Liquidate a position once price moves this fraction against/for it
    stop_loss: float | None = Field(default=None, gt=0.0, le=1.0)
    take_profit: float | None = Field(default=None, gt=0.0)

    # Length of one timestamp tick in seconds (0.001 for epoch millis)
    timestamp_unit_seconds: float = Field(default=1.0, gt=0.0)


class BacktestSettings(BaseSettings):
    """Backtest defaults loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BACKTEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    initial_cash: float = 100_000.0
    tx_cost_pct: float = 0.0
    stop_loss: float | None = None
    take_profit: float | None = None
    timestamp_unit_seconds: float = 1.0

    # CSV input starts with a header line
    has_header: bool = True

    def portfolio_config(self, **overrides) -> PortfolioConfig:
        """Build a validated PortfolioConfig, applying non-None overrides."""
        values = {
            "initial_cash": self.initial_cash,
            "tx_cost_pct": self.tx_cost_pct,
            "stop_loss": self.stop_loss,
            "take_profit": self.take_profit,
            "timestamp_unit_seconds": self.timestamp_unit_seconds,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return PortfolioConfig(**values)


_settings: BacktestSettings | None = None


def get_backtest_settings() -> BacktestSettings:
    """Get cached backtest settings instance."""
    global _settings
    if _settings is None:
        _settings = BacktestSettings()
    return _settings
