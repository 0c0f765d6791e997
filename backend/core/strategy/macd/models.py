"""MACD strategy configuration."""

from pydantic import BaseModel, Field, model_validator

MACD_STRATEGY_NAME = "macd"


class MacdConfig(BaseModel):
    """Configuration for the MACD signal-line strategy."""

    short_period: int = Field(default=12, ge=1)
    long_period: int = Field(default=26, ge=1)
    signal_period: int = Field(default=9, ge=1)
    smoothing: float = Field(default=2.0, gt=0.0)

    # Fractional buffer around the signal line
    threshold: float = Field(default=0.0, ge=0.0, lt=1.0)

    @model_validator(mode="after")
    def _check_periods(self) -> "MacdConfig":
        if self.short_period >= self.long_period:
            raise ValueError(
                f"short_period ({self.short_period}) must be less than "
                f"long_period ({self.long_period})"
            )
        return self
