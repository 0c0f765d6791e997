"""RSI strategy configuration."""

from pydantic import BaseModel, Field, model_validator

from core.models.record import OhlcvField

RSI_STRATEGY_NAME = "rsi"


class RsiConfig(BaseModel):
    """Configuration for the RSI overbought/oversold strategy."""

    period: int = Field(default=14, ge=1)
    oversold: float = Field(default=30.0, ge=0.0, le=100.0)
    overbought: float = Field(default=70.0, ge=0.0, le=100.0)

    # Series quoted as the signal price
    field: OhlcvField = OhlcvField.CLOSE

    @model_validator(mode="after")
    def _check_band(self) -> "RsiConfig":
        if self.oversold >= self.overbought:
            raise ValueError(
                f"oversold ({self.oversold}) must be below overbought ({self.overbought})"
            )
        return self
