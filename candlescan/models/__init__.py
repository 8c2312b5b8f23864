"""Data models for candlescan."""

from candlescan.models.candle import Candle, CandleWindow
from candlescan.models.result import ScanFailure, ScanReport, ScreenResult

__all__ = [
    "Candle",
    "CandleWindow",
    "ScanFailure",
    "ScanReport",
    "ScreenResult",
]
