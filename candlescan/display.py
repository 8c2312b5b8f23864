"""Formatting shared by the terminal and HTML views."""

from candlescan.engine import INFINITE_VOLUME_RATIO
from candlescan.models import ScanReport


def format_ratio(value: float) -> str:
    if value == INFINITE_VOLUME_RATIO:
        return "∞"
    return f"{value:.2f}x"


def format_price(value) -> str:
    if value is None:
        return "-"
    # Low-priced pairs need more precision.
    if value < 1:
        return f"{value:.6f}"
    return f"{value:,.2f}"


def report_to_dict(report: ScanReport) -> dict:
    """Serialize a report for JSON output, including derived lists."""
    data = report.model_dump(mode="json")
    data["rejected"] = [r.symbol for r in report.rejected]
    return data
