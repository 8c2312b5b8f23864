"""Serve command: HTML table over HTTP."""

import click

from candlescan.cli.main import console, load_config_or_exit


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind")
@click.option("-p", "--port", default=5000, show_default=True, type=int, help="Port to listen on")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Serve the ranked table as a self-refreshing web page."""
    from candlescan.web import create_app

    config = load_config_or_exit(ctx)
    app = create_app(config)

    console.print(f"[dim]Serving {len(config.symbols)} pairs on http://{host}:{port}[/dim]")
    app.run(host=host, port=port)
