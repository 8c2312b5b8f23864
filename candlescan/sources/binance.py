"""Binance klines source over the public REST API."""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

import requests

from candlescan.models import Candle
from candlescan.sources.base import BaseCandleSource, CandleSourceError


logger = logging.getLogger(__name__)

BASE_URLS = {
    "futures": "https://fapi.binance.com/fapi/v1",
    "spot": "https://api.binance.com/api/v3",
}

VALID_INTERVALS = [
    "1m", "3m", "5m", "15m", "30m",
    "1h", "2h", "4h", "6h", "8h", "12h",
    "1d", "3d", "1w", "1M",
]

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0",
    "Accept": "application/json",
    # Plain JSON; some edges return garbled gzip bodies otherwise.
    "Accept-Encoding": "identity",
}

MAX_LIMIT = 1500

# Allowed drift between the local clock and the exchange clock.
CLOCK_SKEW_MS = 5000


def parse_kline(row: list) -> tuple[Candle, int]:
    """Convert one raw kline row into a Candle and its close time (ms).
    
    Binance rows are ``[open_time, open, high, low, close, volume,
    close_time, ...]`` with prices and volume as strings.
    """
    candle = Candle(
        open_time=datetime.fromtimestamp(int(row[0]) / 1000, tz=timezone.utc),
        open=float(row[1]),
        high=float(row[2]),
        low=float(row[3]),
        close=float(row[4]),
        volume=float(row[5]),
    )
    return candle, int(row[6])


class BinanceSource(BaseCandleSource):
    """Fetches recent klines from Binance futures or spot.
    
    The still-forming candle (close time in the future) is dropped, so
    results contain closed candles only.
    """

    def __init__(
        self,
        market: str = "futures",
        timeout: float = 10.0,
        proxy: Optional[str] = None,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the source.
        
        Args:
            market: "futures" (USD-M) or "spot".
            timeout: Per-request timeout in seconds.
            proxy: Optional proxy URL used when a direct request fails.
            session: Optional requests session to reuse.
            clock: Returns the current time in seconds since the epoch.
        """
        if market not in BASE_URLS:
            raise ValueError(f"Invalid market: {market}. Must be one of {list(BASE_URLS.keys())}")

        self.market = market
        self.base_url = BASE_URLS[market]
        self.timeout = timeout
        self.proxy = proxy
        self._clock = clock
        self._session = session or requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)

    def _get(self, url: str, params: dict, symbol: str) -> requests.Response:
        try:
            return self._session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            if not self.proxy:
                raise CandleSourceError(f"{symbol}: request failed: {e}", symbol=symbol) from e
            logger.info("%s: direct request failed (%s), retrying via proxy", symbol, e)

        try:
            return self._session.get(
                url,
                params=params,
                timeout=self.timeout,
                proxies={"http": self.proxy, "https": self.proxy},
            )
        except requests.RequestException as e:
            raise CandleSourceError(f"{symbol}: proxy request failed: {e}", symbol=symbol) from e

    def fetch_recent_candles(self, symbol: str, interval: str, count: int) -> list[Candle]:
        symbol = symbol.upper()

        if interval not in VALID_INTERVALS:
            raise ValueError(f"Invalid interval: {interval}. Must be one of {VALID_INTERVALS}")
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")

        # One extra row covers the candle that is still forming.
        params = {"symbol": symbol, "interval": interval, "limit": min(count + 1, MAX_LIMIT)}
        response = self._get(f"{self.base_url}/klines", params, symbol)

        if not response.ok:
            raise CandleSourceError(f"{symbol}: HTTP {response.status_code}", symbol=symbol)

        text = response.text
        if not text or not text.lstrip().startswith("["):
            raise CandleSourceError(
                f"{symbol}: invalid data format ({text[:80]!r})",
                symbol=symbol,
            )

        try:
            rows = json.loads(text)
            parsed = [parse_kline(row) for row in rows]
        except (ValueError, TypeError, IndexError, OverflowError, OSError) as e:
            raise CandleSourceError(f"{symbol}: malformed kline data: {e}", symbol=symbol) from e

        now_ms = int(self._clock() * 1000)
        closed = [
            candle
            for i, (candle, close_ms) in enumerate(parsed)
            # The newest row is the forming candle unless it closed well before now.
            if close_ms < (now_ms - CLOCK_SKEW_MS if i == len(parsed) - 1 else now_ms)
        ]
        logger.debug("%s: %d rows, %d closed", symbol, len(parsed), len(closed))

        return closed[-count:]

    def close(self) -> None:
        self._session.close()
