"""Candle sources for candlescan."""

from candlescan.sources.base import BaseCandleSource, CandleSourceError
from candlescan.sources.binance import VALID_INTERVALS, BinanceSource

__all__ = [
    "BaseCandleSource",
    "BinanceSource",
    "CandleSourceError",
    "VALID_INTERVALS",
]
