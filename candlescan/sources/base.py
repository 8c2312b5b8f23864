"""Base candle source interface for candlescan."""

from abc import ABC, abstractmethod

from candlescan.models import Candle


class CandleSourceError(ValueError):
    """Raised when candles for a symbol cannot be fetched or parsed."""

    def __init__(self, message: str, symbol: str = ""):
        super().__init__(message)
        self.symbol = symbol


class BaseCandleSource(ABC):
    """Abstract base class for candle providers.
    
    Implementations return closed candles only, oldest first, so the
    last element is always the most recently closed candle.
    """

    @abstractmethod
    def fetch_recent_candles(self, symbol: str, interval: str, count: int) -> list[Candle]:
        """Get the most recent closed candles for a symbol.
        
        Args:
            symbol: Trading pair symbol (e.g. BTCUSDT).
            interval: Candle interval label (e.g. 30m).
            count: Number of closed candles wanted.
            
        Returns:
            Up to ``count`` closed candles, oldest first.
            
        Raises:
            CandleSourceError: If the candles cannot be fetched.
            ValueError: If the interval is not supported.
        """
        pass

    def close(self) -> None:
        """Release any held resources."""
