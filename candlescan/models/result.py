"""Screen result and scan report models."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class ScreenResult(BaseModel):
    """Derived metrics for one symbol's last closed candle."""

    symbol: str = Field(..., description="Trading pair symbol")
    body_percent: float = Field(..., description="Candle body as % of open")
    volume_ratio: float = Field(..., ge=0, description="Volume vs previous closed candle")
    passes_filter: bool = Field(..., description="Bullish and body >= threshold")
    bullish: bool = Field(default=False, description="Close above open")
    close: Optional[float] = Field(default=None, description="Close of the last closed candle")
    candle_time: Optional[datetime] = Field(default=None, description="Open time of the last closed candle")

    model_config = {"frozen": True}


class ScanFailure(BaseModel):
    """A symbol that could not be evaluated."""

    symbol: str
    reason: str = Field(..., description="Error class name")
    message: str = ""

    model_config = {"frozen": True}


class ScanReport(BaseModel):
    """Outcome of one scan cycle over a list of symbols."""

    ranked: list[ScreenResult] = Field(default_factory=list)
    evaluated: list[ScreenResult] = Field(default_factory=list)
    failures: list[ScanFailure] = Field(default_factory=list)
    interval: str = "30m"
    threshold: float = 2.0
    scanned_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def rejected(self) -> list[ScreenResult]:
        """Symbols that evaluated cleanly but did not pass the filter."""
        return [r for r in self.evaluated if not r.passes_filter]

    @property
    def failed_symbols(self) -> list[str]:
        return [f.symbol for f in self.failures]
