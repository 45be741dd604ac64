"""CLI command: frontaudit server — serve the HTTP API."""

from __future__ import annotations

import click
from rich.console import Console

console = Console(stderr=True)


@click.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1).")
@click.option("--port", type=int, default=8471, help="Port to listen on (default: 8471).")
@click.pass_context
def server(ctx: click.Context, host: str, port: int) -> None:
    """Start the frontaudit HTTP API."""
    try:
        import uvicorn
    except ImportError:
        console.print(
            "[red]Web dependencies not installed.[/red]\n"
            "Install with: pip install frontaudit[web]"
        )
        raise SystemExit(1)

    from frontaudit.web.app import create_app

    config = ctx.obj["config"]
    console.print(
        f"[bold]frontaudit[/bold] API for [cyan]{config.workspace}[/cyan] "
        f"on [cyan]http://{host}:{port}/api/docs[/cyan]\n"
    )
    uvicorn.run(create_app(config), host=host, port=port, log_level="info")
