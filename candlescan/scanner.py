"""Scan a list of symbols: fetch candles, evaluate, rank.

Per-symbol failures never abort the scan. They are recorded in the
report and logged separately from symbols that simply did not pass.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Optional

from candlescan.config import ScreenerConfig
from candlescan.engine import ScreenError, evaluate, rank_and_filter
from candlescan.models import CandleWindow, ScanFailure, ScanReport, ScreenResult
from candlescan.sources.base import BaseCandleSource, CandleSourceError


logger = logging.getLogger(__name__)


def scan_symbol(symbol: str, source: BaseCandleSource, config: ScreenerConfig) -> ScreenResult:
    """Fetch and evaluate one symbol.
    
    Raises:
        CandleSourceError: If the candles cannot be fetched.
        ScreenError: If the candles cannot be evaluated.
    """
    candles = source.fetch_recent_candles(symbol, config.interval, config.candle_count)
    window = CandleWindow(symbol=symbol, candles=tuple(candles))
    return evaluate(window, threshold=config.threshold)


def _unique(symbols: Iterable[str]) -> list[str]:
    seen = []
    for s in symbols:
        s = s.upper()
        if s not in seen:
            seen.append(s)
    return seen


def scan_symbols(
    symbols: Iterable[str],
    source: BaseCandleSource,
    config: ScreenerConfig,
    sleep=time.sleep,
) -> ScanReport:
    """Scan symbols and rank the ones that pass the filter.
    
    Runs sequentially with ``config.request_delay`` between requests, or
    with at most ``config.max_workers`` concurrent requests.
    
    Args:
        symbols: Symbols to scan; duplicates are scanned once.
        source: Candle source to fetch from.
        config: Screener configuration.
        sleep: Delay function used between sequential requests.
        
    Returns:
        ScanReport with ranked, evaluated and failed symbols.
    """
    symbols = _unique(symbols)
    outcomes: dict[str, object] = {}

    def run(symbol: str):
        try:
            return scan_symbol(symbol, source, config)
        except (CandleSourceError, ScreenError) as e:
            return ScanFailure(symbol=e.symbol or symbol, reason=type(e).__name__, message=str(e))

    if config.max_workers <= 1 or len(symbols) <= 1:
        for i, symbol in enumerate(symbols):
            if i and config.request_delay > 0:
                sleep(config.request_delay)
            outcomes[symbol] = run(symbol)
    else:
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            future_to_symbol = {executor.submit(run, s): s for s in symbols}
            for future in as_completed(future_to_symbol):
                outcomes[future_to_symbol[future]] = future.result()

    evaluated: list[ScreenResult] = []
    failures: list[ScanFailure] = []

    # Report in input order regardless of completion order.
    for symbol in symbols:
        outcome = outcomes[symbol]
        if isinstance(outcome, ScanFailure):
            logger.warning("%s: failed to evaluate (%s): %s", symbol, outcome.reason, outcome.message)
            failures.append(outcome)
            continue

        if not outcome.passes_filter:
            logger.debug(
                "%s: did not pass filter (body %.2f%%, bullish=%s)",
                symbol, outcome.body_percent, outcome.bullish,
            )
        evaluated.append(outcome)

    ranked = rank_and_filter(evaluated)
    report = ScanReport(
        ranked=ranked,
        evaluated=evaluated,
        failures=failures,
        interval=config.interval,
        threshold=config.threshold,
    )

    logger.info(
        "Scanned %d symbols: %d passed, %d rejected, %d failed%s",
        len(symbols), len(ranked), len(report.rejected), len(failures),
        f" ({', '.join(report.failed_symbols)})" if failures else "",
    )

    return report


def build_source(config: ScreenerConfig, session=None) -> BaseCandleSource:
    """Create the candle source described by the config."""
    from candlescan.sources.binance import BinanceSource

    return BinanceSource(
        market=config.market,
        timeout=config.request_timeout,
        proxy=config.proxy,
        session=session,
    )


def run_scan(
    config: ScreenerConfig,
    source: Optional[BaseCandleSource] = None,
    symbols: Optional[Iterable[str]] = None,
) -> ScanReport:
    """Scan ``symbols`` (default: the configured ones) with a fresh or given source."""
    if source is not None:
        return scan_symbols(symbols or config.symbols, source, config)

    owned = build_source(config)
    try:
        return scan_symbols(symbols or config.symbols, owned, config)
    finally:
        owned.close()
