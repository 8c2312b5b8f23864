"""Config commands for candlescan CLI."""

import click
import toml
from rich.panel import Panel

from candlescan.cli.main import console, load_config_or_exit


@click.group()
def config() -> None:
    """Show or create the config file."""


@config.command("show")
@click.pass_context
def show(ctx: click.Context) -> None:
    """Print the effective configuration."""
    cfg = load_config_or_exit(ctx)
    console.print(Panel(
        toml.dumps({"screener": cfg.model_dump(exclude_none=True)}).rstrip(),
        title="[bold cyan]candlescan config[/bold cyan]",
        border_style="cyan",
    ))


@config.command("init")
@click.option("-f", "--force", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Write a config file with the default settings."""
    from candlescan.config import DEFAULT_CONFIG_PATH, ScreenerConfig, save_config

    path = ctx.obj.get("config_path") or DEFAULT_CONFIG_PATH

    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists.[/yellow] Use [cyan]--force[/cyan] to overwrite.")
        raise SystemExit(1)

    written = save_config(ScreenerConfig(), path)
    console.print(f"[green]✓[/green] Wrote {written}")
