"""candlescan - bullish candle screener for Binance pairs."""

__version__ = "0.1.0"
