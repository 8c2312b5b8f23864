"""Per-symbol evaluation errors."""


class ScreenError(ValueError):
    """Base class for errors raised while evaluating one symbol."""

    def __init__(self, message: str, symbol: str = ""):
        super().__init__(message)
        self.symbol = symbol


class InsufficientData(ScreenError):
    """The candle window holds fewer closed candles than required."""


class InvalidCandle(ScreenError):
    """A candle has a non-positive open or close price."""
