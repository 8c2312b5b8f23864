"""Candle (OHLCV) data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Candle(BaseModel):
    """Represents a single OHLCV candle."""

    open_time: Optional[datetime] = Field(default=None, description="Candle open time")
    open: float = Field(..., ge=0, description="Opening price")
    high: float = Field(..., ge=0, description="High price")
    low: float = Field(..., ge=0, description="Low price")
    close: float = Field(..., ge=0, description="Closing price")
    volume: float = Field(..., ge=0, description="Traded base-asset volume")

    model_config = {"frozen": True}


class CandleWindow(BaseModel):
    """The most recent closed candles for one symbol, oldest first.

    ``candles[-1]`` is always the last fully closed candle and
    ``candles[-2]`` the closed candle before it. Sources drop the
    still-forming candle before a window is built.
    """

    symbol: str = Field(..., min_length=1, description="Trading pair symbol")
    candles: tuple[Candle, ...] = Field(default=(), description="Closed candles, oldest first")

    model_config = {"frozen": True}

    def __len__(self) -> int:
        return len(self.candles)

    @property
    def last_closed(self) -> Optional[Candle]:
        return self.candles[-1] if self.candles else None

    @property
    def previous_closed(self) -> Optional[Candle]:
        return self.candles[-2] if len(self.candles) > 1 else None
