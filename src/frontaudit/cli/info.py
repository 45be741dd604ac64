"""CLI command: frontaudit info — show the detected framework profile."""

from __future__ import annotations

import json

import click
from rich.console import Console

from frontaudit.tools import handle_project_info

console = Console(stderr=True)


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON to stdout.")
@click.pass_context
def info(ctx: click.Context, as_json: bool) -> None:
    """Show which framework, router and bundler the project uses."""
    report = handle_project_info(context=ctx.obj["context"])
    if as_json:
        click.echo(json.dumps(report, indent=2))
        return

    console.print(f"[bold]{report['description']}[/bold]")
    console.print(f"  Root:        [cyan]{report['root']}[/cyan]")
    console.print(f"  Framework:   {report['framework']}")
    console.print(f"  Bundler:     {report['bundler']}")
    console.print(f"  TypeScript:  {'yes' if report['usesTypeScript'] else 'no'}")
    if report["framework"] == "nextjs":
        console.print(f"  App Router:  {'yes' if report['hasAppRouter'] else 'no'}")
        console.print(f"  Pages Router: {'yes' if report['hasPagesRouter'] else 'no'}")
