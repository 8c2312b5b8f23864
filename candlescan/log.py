"""Logging setup for the command line entry points."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(log_level: str = "INFO") -> None:
    """Send log records to stderr through rich.
    
    Library modules only create loggers; this is called once by the CLI.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # Keep connection pool chatter out of debug output.
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))
