"""Metrics and filter engine."""

from candlescan.engine.errors import InsufficientData, InvalidCandle, ScreenError
from candlescan.engine.metrics import (
    DEFAULT_THRESHOLD,
    INFINITE_VOLUME_RATIO,
    body_percent,
    evaluate,
    is_bullish,
    rank_and_filter,
    volume_ratio,
)

__all__ = [
    "DEFAULT_THRESHOLD",
    "INFINITE_VOLUME_RATIO",
    "InsufficientData",
    "InvalidCandle",
    "ScreenError",
    "body_percent",
    "evaluate",
    "is_bullish",
    "rank_and_filter",
    "volume_ratio",
]
