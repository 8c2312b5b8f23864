"""Scan and watch commands for candlescan CLI."""

import json
import time
from typing import Optional

import click
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from candlescan.config import ScreenerConfig
from candlescan.display import format_price, format_ratio, report_to_dict
from candlescan.models import ScanReport
from candlescan.scanner import run_scan
from candlescan.sources.binance import VALID_INTERVALS
from candlescan.cli.main import load_config_or_exit

console = Console()


def _apply_overrides(
    config: ScreenerConfig,
    symbols: tuple[str, ...],
    interval: Optional[str],
    threshold: Optional[float],
) -> ScreenerConfig:
    updates = {}
    if symbols:
        updates["symbols"] = list(symbols)
    if interval:
        updates["interval"] = interval
    if threshold is not None:
        updates["threshold"] = threshold
    if not updates:
        return config
    # Re-validate so overrides get the same checks as the file.
    return ScreenerConfig(**{**config.model_dump(), **updates})


def build_results_table(report: ScanReport, show_all: bool = False) -> Table:
    """Render a scan report as a rich table."""
    table = Table(
        title=(
            f"Bullish ≥ {report.threshold:.2f}% on {report.interval} "
            f"({len(report.ranked)} matches)"
        ),
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("#", justify="right", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("Close", justify="right")
    table.add_column("Body %", justify="right")
    table.add_column("Vol Ratio", justify="right")

    for rank, r in enumerate(report.ranked, start=1):
        vol_style = "yellow" if r.volume_ratio >= 2.0 else "dim"
        table.add_row(
            str(rank),
            r.symbol,
            format_price(r.close),
            f"[green]{r.body_percent:.2f}%[/green]",
            f"[{vol_style}]{format_ratio(r.volume_ratio)}[/{vol_style}]",
        )

    if show_all:
        for r in report.rejected:
            color = "green" if r.bullish else "red"
            table.add_row(
                "-",
                f"[dim]{r.symbol}[/dim]",
                f"[dim]{format_price(r.close)}[/dim]",
                f"[{color}]{r.body_percent:.2f}%[/{color}]",
                f"[dim]{format_ratio(r.volume_ratio)}[/dim]",
            )

    return table


def _failures_text(report: ScanReport) -> Optional[Text]:
    if not report.failures:
        return None
    text = Text("Failed: ", style="red")
    text.append(", ".join(f"{f.symbol} ({f.reason})" for f in report.failures), style="dim")
    return text


def render_report(report: ScanReport, show_all: bool = False, countdown: Optional[int] = None) -> Group:
    """Table plus failure line and optional countdown."""
    parts = [build_results_table(report, show_all=show_all)]

    failures = _failures_text(report)
    if failures is not None:
        parts.append(failures)

    footer = f"Scanned at {report.scanned_at.strftime('%H:%M:%S')} UTC"
    if countdown is not None:
        footer += f" · next refresh in {countdown}s (Ctrl+C to stop)"
    parts.append(Text(footer, style="dim"))

    return Group(*parts)


symbol_option = click.option(
    "-s", "--symbol", "symbols",
    multiple=True,
    help="Pair to scan (repeatable); defaults to the configured list",
)
interval_option = click.option(
    "-i", "--interval",
    type=click.Choice(VALID_INTERVALS),
    help="Candle interval (default from config, usually 30m)",
)
threshold_option = click.option(
    "-t", "--threshold",
    type=click.FloatRange(min=0),
    help="Minimum body percentage (default 2.0)",
)


@click.command()
@symbol_option
@interval_option
@threshold_option
@click.option("-a", "--show-all", is_flag=True, help="Also list pairs that did not pass")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.pass_context
def scan(
    ctx: click.Context,
    symbols: tuple[str, ...],
    interval: Optional[str],
    threshold: Optional[float],
    show_all: bool,
    as_json: bool,
) -> None:
    """Scan pairs once and show the ranked matches.
    
    \b
    Examples:
      candlescan scan
      candlescan scan -s BTCUSDT -s ETHUSDT -i 1h
      candlescan scan --threshold 1.5 --show-all
    """
    config = _apply_overrides(load_config_or_exit(ctx), symbols, interval, threshold)

    if not as_json:
        console.print(f"[dim]Scanning {len(config.symbols)} pairs on {config.interval}...[/dim]")

    report = run_scan(config)

    if as_json:
        click.echo(json.dumps(report_to_dict(report), indent=2))
        return

    if not report.ranked and not show_all:
        console.print(Panel(
            "[dim]No pairs passed the filter.[/dim]\n\n"
            "Try a lower [cyan]--threshold[/cyan] or use [cyan]--show-all[/cyan].",
            title="[bold]No Results[/bold]",
            border_style="dim",
        ))
        failures = _failures_text(report)
        if failures is not None:
            console.print(failures)
        return

    console.print(render_report(report, show_all=show_all))


@click.command()
@symbol_option
@interval_option
@threshold_option
@click.option(
    "-r", "--refresh",
    type=click.IntRange(min=5),
    help="Seconds between scans (default from config)",
)
@click.pass_context
def watch(
    ctx: click.Context,
    symbols: tuple[str, ...],
    interval: Optional[str],
    threshold: Optional[float],
    refresh: Optional[int],
) -> None:
    """Re-scan on a timer with a countdown to the next refresh.
    
    Press Ctrl+C to stop watching.
    """
    from rich.live import Live

    config = _apply_overrides(load_config_or_exit(ctx), symbols, interval, threshold)
    period = refresh or config.refresh_seconds

    console.print(f"[dim]Watching {len(config.symbols)} pairs, refreshing every {period}s...[/dim]\n")

    try:
        report = run_scan(config)
        with Live(render_report(report, countdown=period), refresh_per_second=2, console=console) as live:
            while True:
                for remaining in range(period, 0, -1):
                    live.update(render_report(report, countdown=remaining))
                    time.sleep(1)
                report = run_scan(config)
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped watching.[/dim]")
