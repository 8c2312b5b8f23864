"""Tests for shared formatting helpers."""

from candlescan.display import format_price, format_ratio
from candlescan.engine import INFINITE_VOLUME_RATIO


class TestFormatRatio:
    def test_sentinel_shown_as_infinity(self):
        assert format_ratio(INFINITE_VOLUME_RATIO) == "∞"

    def test_real_ratio_above_sentinel_shown_as_number(self):
        assert format_ratio(2e9) == "2000000000.00x"

    def test_ordinary_ratio(self):
        assert format_ratio(2.5) == "2.50x"


class TestFormatPrice:
    def test_low_priced_pair_precision(self):
        assert format_price(0.0123) == "0.012300"

    def test_missing_price(self):
        assert format_price(None) == "-"
