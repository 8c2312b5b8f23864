"""Main CLI entry point for candlescan.

Commands are imported only when invoked so ``--help`` stays fast.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from candlescan.log import configure_logging

console = Console()


class LazyGroup(click.Group):
    """A click Group that imports command modules on first use."""

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(set(super().list_commands(ctx)) | set(self._lazy_subcommands))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name in self.commands:
            return self.commands[cmd_name]
        if cmd_name not in self._lazy_subcommands:
            return None

        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if isinstance(attr, click.Command) and attr.name == cmd_name:
                self.add_command(attr)
                return attr

        raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")


LAZY_SUBCOMMANDS = {
    "scan": "candlescan.cli.scan",
    "watch": "candlescan.cli.scan",
    "serve": "candlescan.cli.serve",
    "config": "candlescan.cli.config_cmd",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def load_config_or_exit(ctx: click.Context):
    """Load the config named on the command line, or exit with an error panel."""
    from candlescan.config import ConfigError, load_config

    obj = ctx.ensure_object(dict)
    if "config" in obj:
        return obj["config"]

    try:
        config = load_config(obj.get("config_path"))
    except ConfigError as e:
        console.print(Panel(
            f"[red]{e}[/red]",
            title="[bold red]Configuration Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    if obj.get("log_level") is None:
        configure_logging(config.log_level)

    obj["config"] = config
    return config


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="candlescan")
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: ~/.config/candlescan/config.toml)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], log_level: Optional[str]) -> None:
    """candlescan - screen crypto pairs for strong bullish candles.
    
    Fetches the latest closed candles from Binance, keeps the pairs whose
    last candle is bullish with a body above the threshold, and ranks
    them by volume against the previous candle.
    
    \b
    Quick Start:
      candlescan scan                  # One scan of the configured pairs
      candlescan watch                 # Refresh on a timer
      candlescan serve                 # HTML table on http://127.0.0.1:5000
      candlescan config init           # Write a config file to edit
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_level"] = log_level

    if log_level:
        configure_logging(log_level)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
