"""Property-based tests for the scan orchestration.

**Feature: candle-screener**
"""

import logging
import threading
from typing import Union

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from candlescan.config import ScreenerConfig
from candlescan.models import Candle
from candlescan.scanner import run_scan, scan_symbol, scan_symbols
from candlescan.sources.base import BaseCandleSource, CandleSourceError


def make_candle(open_: float, close: float, volume: float) -> Candle:
    return Candle(open=open_, high=max(open_, close), low=min(open_, close), close=close, volume=volume)


class FakeSource(BaseCandleSource):
    """Serves canned candles or raises canned errors per symbol."""

    def __init__(self, data: dict[str, Union[list[Candle], Exception]]):
        self.data = data
        self.calls: list[tuple[str, str, int]] = []
        self._lock = threading.Lock()

    def fetch_recent_candles(self, symbol, interval, count):
        with self._lock:
            self.calls.append((symbol, interval, count))
        value = self.data[symbol]
        if isinstance(value, Exception):
            raise value
        return value[-count:]


def passing(ratio: float) -> list[Candle]:
    return [make_candle(100, 100.5, 100), make_candle(100, 105, 100 * ratio)]


def rejected() -> list[Candle]:
    return [make_candle(100, 100.5, 100), make_candle(100, 95, 500)]


@pytest.fixture
def config():
    return ScreenerConfig(symbols=["BTCUSDT"], request_delay=0)


class TestScanSymbol:
    def test_uses_configured_interval_and_count(self, config):
        source = FakeSource({"BTCUSDT": passing(2.0)})
        cfg = config.model_copy(update={"interval": "1h", "candle_count": 2})

        result = scan_symbol("BTCUSDT", source, cfg)

        assert source.calls == [("BTCUSDT", "1h", 2)]
        assert result.passes_filter is True

    def test_errors_propagate(self, config):
        source = FakeSource({"BTCUSDT": CandleSourceError("HTTP 500")})

        with pytest.raises(CandleSourceError):
            scan_symbol("BTCUSDT", source, config)


class TestFailureIsolation:
    """
    **Feature: candle-screener, Property 7: Failures Never Abort The Scan**
    
    *For any* mix of good and failing symbols, every good symbol is
    evaluated and every failing one is recorded.
    """

    @given(
        outcomes=st.lists(
            st.sampled_from(["pass", "reject", "http", "short", "invalid"]),
            min_size=1,
            max_size=12,
        )
    )
    @settings(max_examples=50)
    def test_every_symbol_accounted_for(self, outcomes: list[str]):
        data = {}
        for i, kind in enumerate(outcomes):
            symbol = f"SYM{i}USDT"
            if kind == "pass":
                data[symbol] = passing(1 + i)
            elif kind == "reject":
                data[symbol] = rejected()
            elif kind == "http":
                data[symbol] = CandleSourceError("HTTP 503")
            elif kind == "short":
                data[symbol] = [make_candle(100, 105, 10)]
            else:
                data[symbol] = [make_candle(100, 101, 10), Candle(open=0, high=1, low=0, close=1, volume=1)]

        config = ScreenerConfig(symbols=list(data), request_delay=0)
        report = scan_symbols(data.keys(), FakeSource(data), config)

        assert len(report.evaluated) + len(report.failures) == len(outcomes)
        assert len(report.ranked) == outcomes.count("pass")
        assert len(report.rejected) == outcomes.count("reject")
        assert len(report.failures) == outcomes.count("http") + outcomes.count("short") + outcomes.count("invalid")

    def test_failure_reasons(self):
        data = {
            "AUSDT": CandleSourceError("HTTP 451"),
            "BUSDT": [make_candle(100, 105, 10)],
            "CUSDT": [make_candle(100, 101, 10), Candle(open=0, high=1, low=0, close=1, volume=1)],
        }
        config = ScreenerConfig(symbols=list(data), request_delay=0)

        report = scan_symbols(data, FakeSource(data), config)

        reasons = {f.symbol: f.reason for f in report.failures}
        assert reasons == {
            "AUSDT": "CandleSourceError",
            "BUSDT": "InsufficientData",
            "CUSDT": "InvalidCandle",
        }

    def test_failure_keeps_symbol_from_error(self, config):
        source = FakeSource({"BTCUSDT": CandleSourceError("HTTP 500", symbol="BTCUSDT")})

        report = scan_symbols(["btcusdt"], source, config)

        assert report.failures[0].symbol == "BTCUSDT"
        assert report.failures[0].message == "HTTP 500"

    def test_unexpected_errors_propagate(self, config):
        source = FakeSource({"BTCUSDT": RuntimeError("bug")})

        with pytest.raises(RuntimeError):
            scan_symbols(["BTCUSDT"], source, config)


class TestLoggedDistinction:
    """
    **Feature: candle-screener, Property 8: Failed vs Filtered Are Logged Differently**
    """

    def test_failed_logged_as_warning_rejected_as_debug(self, caplog):
        data = {"BADUSDT": CandleSourceError("HTTP 500"), "LOWUSDT": rejected()}
        config = ScreenerConfig(symbols=list(data), request_delay=0)

        with caplog.at_level(logging.DEBUG, logger="candlescan.scanner"):
            scan_symbols(data, FakeSource(data), config)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        debugs = [r for r in caplog.records if r.levelno == logging.DEBUG]
        assert any("BADUSDT" in r.getMessage() and "failed to evaluate" in r.getMessage() for r in warnings)
        assert any("LOWUSDT" in r.getMessage() and "did not pass filter" in r.getMessage() for r in debugs)
        assert not any("LOWUSDT" in r.getMessage() for r in warnings)

    def test_summary_names_failed_symbols(self, caplog):
        data = {"BADUSDT": CandleSourceError("HTTP 500"), "OKUSDT": passing(2)}
        config = ScreenerConfig(symbols=list(data), request_delay=0)

        with caplog.at_level(logging.INFO, logger="candlescan.scanner"):
            scan_symbols(data, FakeSource(data), config)

        summary = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Scanned")]
        assert summary == ["Scanned 2 symbols: 1 passed, 0 rejected, 1 failed (BADUSDT)"]


class TestScanOrdering:
    def test_ranked_by_volume_ratio(self):
        data = {"AUSDT": passing(1.5), "BUSDT": passing(4.0), "CUSDT": passing(2.5), "DUSDT": rejected()}
        config = ScreenerConfig(symbols=list(data), request_delay=0)

        report = scan_symbols(data, FakeSource(data), config)

        assert [r.symbol for r in report.ranked] == ["BUSDT", "CUSDT", "AUSDT"]
        assert [r.symbol for r in report.evaluated] == ["AUSDT", "BUSDT", "CUSDT", "DUSDT"]

    def test_parallel_matches_sequential(self):
        data = {f"S{i}USDT": passing(1 + (i % 4)) for i in range(10)}
        data["S3USDT"] = CandleSourceError("HTTP 500")
        sequential = ScreenerConfig(symbols=list(data), request_delay=0)
        parallel = sequential.model_copy(update={"max_workers": 4})

        a = scan_symbols(data, FakeSource(data), sequential)
        b = scan_symbols(data, FakeSource(data), parallel)

        assert a.ranked == b.ranked
        assert a.evaluated == b.evaluated
        assert a.failures == b.failures

    def test_delay_between_sequential_requests(self):
        data = {"AUSDT": passing(2), "BUSDT": passing(2), "CUSDT": passing(2)}
        config = ScreenerConfig(symbols=list(data), request_delay=0.5)
        sleeps = []

        scan_symbols(data, FakeSource(data), config, sleep=sleeps.append)

        assert sleeps == [0.5, 0.5]

    def test_duplicates_scanned_once(self, config):
        source = FakeSource({"BTCUSDT": passing(2)})

        report = scan_symbols(["BTCUSDT", "btcusdt", "BTCUSDT"], source, config)

        assert len(source.calls) == 1
        assert len(report.ranked) == 1

    def test_report_carries_settings(self):
        config = ScreenerConfig(symbols=["BTCUSDT"], interval="4h", threshold=3.5, request_delay=0)

        report = scan_symbols([], FakeSource({}), config)

        assert report.interval == "4h"
        assert report.threshold == 3.5
        assert report.ranked == []


class TestRunScan:
    def test_defaults_to_configured_symbols(self):
        data = {"AUSDT": passing(2), "BUSDT": rejected()}
        config = ScreenerConfig(symbols=["AUSDT", "BUSDT"], request_delay=0)
        source = FakeSource(data)

        report = run_scan(config, source=source)

        assert [c[0] for c in source.calls] == ["AUSDT", "BUSDT"]
        assert [r.symbol for r in report.ranked] == ["AUSDT"]
