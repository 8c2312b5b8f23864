"""Command-line interface for candlescan."""

from candlescan.cli.main import cli, main

__all__ = ["cli", "main"]
