"""Candle metrics and the bullish-body screening rule.

All functions here are pure. A window is ordered oldest first and its
last element is the most recently *closed* candle; the candle before it
is the comparison candle for the volume ratio.
"""

import math
from typing import Iterable

from candlescan.engine.errors import InsufficientData, InvalidCandle
from candlescan.models import Candle, CandleWindow, ScreenResult


DEFAULT_THRESHOLD = 2.0
MIN_WINDOW = 2

# Reported when the previous candle traded no volume at all.
INFINITE_VOLUME_RATIO = 1e9


def body_percent(candle: Candle) -> float:
    """Calculate the candle body as a percentage of its open.
    
    Args:
        candle: Candle to measure.
        
    Returns:
        ``abs(close - open) / open * 100``, or NaN when open is zero.
    """
    if candle.open == 0:
        return math.nan
    return abs((candle.close - candle.open) / candle.open) * 100


def is_bullish(candle: Candle) -> bool:
    return candle.close > candle.open


def volume_ratio(current: Candle, previous: Candle) -> float:
    """Calculate current volume relative to the previous candle.
    
    Args:
        current: The later candle.
        previous: The candle it is compared against.
        
    Returns:
        The ratio, or INFINITE_VOLUME_RATIO when the previous volume is zero.
    """
    if previous.volume > 0:
        return current.volume / previous.volume
    return INFINITE_VOLUME_RATIO


def _check_prices(candle: Candle, symbol: str, label: str) -> None:
    if candle.open <= 0 or candle.close <= 0:
        raise InvalidCandle(
            f"{symbol}: {label} candle has non-positive price "
            f"(open={candle.open}, close={candle.close})",
            symbol=symbol,
        )


def evaluate(window: CandleWindow, threshold: float = DEFAULT_THRESHOLD) -> ScreenResult:
    """Apply the screening rule to a symbol's candle window.
    
    The last closed candle passes when it is bullish and its body is at
    least ``threshold`` percent. The volume ratio compares it with the
    closed candle before it.
    
    Args:
        window: Closed candles for one symbol, oldest first.
        threshold: Minimum body percentage (default 2.0).
        
    Returns:
        ScreenResult for the window's symbol.
        
    Raises:
        InsufficientData: If the window has fewer than two candles.
        InvalidCandle: If either candle has a non-positive open or close.
        ValueError: If threshold is negative.
    """
    if threshold < 0:
        raise ValueError(f"threshold must be >= 0, got {threshold}")

    if len(window) < MIN_WINDOW:
        raise InsufficientData(
            f"{window.symbol}: need {MIN_WINDOW} closed candles, got {len(window)}",
            symbol=window.symbol,
        )

    last = window.last_closed
    previous = window.previous_closed
    _check_prices(last, window.symbol, "last")
    _check_prices(previous, window.symbol, "previous")

    body = body_percent(last)
    bullish = is_bullish(last)

    return ScreenResult(
        symbol=window.symbol,
        body_percent=body,
        volume_ratio=volume_ratio(last, previous),
        passes_filter=bullish and body >= threshold,
        bullish=bullish,
        close=last.close,
        candle_time=last.open_time,
    )


def rank_and_filter(results: Iterable[ScreenResult]) -> list[ScreenResult]:
    """Keep passing results, highest volume ratio first.
    
    Ties on volume ratio are ordered by symbol ascending.
    """
    passing = [r for r in results if r.passes_filter]
    passing.sort(key=lambda r: (-r.volume_ratio, r.symbol))
    return passing
