"""Moving-average crossover strategy configuration."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

CROSSOVER_STRATEGY_NAME = "crossover"


class CrossoverConfig(BaseModel):
    """Configuration for the moving-average crossover strategy."""

    short_period: int = Field(default=20, ge=1)
    long_period: int = Field(default=50, ge=1)

    # Fractional buffer around the long average to ignore chop (0.01 = 1%)
    threshold: float = Field(default=0.0, ge=0.0, lt=1.0)

    average: Literal["sma", "ema"] = "sma"
    smoothing: float = Field(default=2.0, gt=0.0)  # EMA only

    @model_validator(mode="after")
    def _check_periods(self) -> "CrossoverConfig":
        if self.short_period >= self.long_period:
            raise ValueError(
                f"short_period ({self.short_period}) must be less than "
                f"long_period ({self.long_period})"
            )
        return self
