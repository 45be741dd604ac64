"""CLI commands: frontaudit quality / migration — code review reports."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from frontaudit.tools import handle_check_migration, handle_review_quality, run_tool

console = Console(stderr=True)

_METRICS = ("maintainability", "complexity", "testability", "readability", "overall")


def _run(handler, ctx: click.Context, path: str | None, **kwargs: Any) -> dict[str, Any]:
    if path:
        path = str(Path(path).resolve())
    report = run_tool(handler, file_path=path, context=ctx.obj["context"], **kwargs)
    if report.get("isError"):
        console.print(f"[red]Error:[/red] {report['error']}")
        sys.exit(1)
    return report


@click.command()
@click.argument("path", required=False, type=click.Path(exists=True))
@click.option("--include-tests", is_flag=True, help="Also score test files.")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON to stdout.")
@click.pass_context
def quality(ctx: click.Context, path: str | None, include_tests: bool, as_json: bool) -> None:
    """Score maintainability, complexity, testability and readability."""
    report = _run(handle_review_quality, ctx, path, include_tests=include_tests or None)
    if as_json:
        click.echo(json.dumps(report, indent=2))
        return

    rows = report.get("results", [report])
    table = Table(title="quality")
    table.add_column("File", style="cyan")
    for metric in _METRICS:
        table.add_column(metric.capitalize(), justify="right")
    for row in rows:
        table.add_row(row["file"], *(str(row[m]) for m in _METRICS))
    console.print(table)

    if "averages" in report and report["averages"]:
        averages = ", ".join(f"{m}: {report['averages'][m]}" for m in _METRICS)
        console.print(f"{report['totalFilesScanned']} file(s) scored. Averages: {averages}")


@click.command()
@click.argument("path", required=False, type=click.Path(exists=True))
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON to stdout.")
@click.pass_context
def migration(ctx: click.Context, path: str | None, as_json: bool) -> None:
    """Check Pages Router files for App Router migration blockers."""
    report = _run(handle_check_migration, ctx, path)
    if as_json:
        click.echo(json.dumps(report, indent=2))
    else:
        for result in report.get("results", [report]):
            _print_migration(result)
        if "summary" in report:
            summary = report["summary"]
            console.print(
                f"\n{summary['ready']}/{report['totalPages']} page(s) ready, "
                f"{summary['hasBlockers']} with blockers: {summary['overallReadiness']}"
            )

    results = report.get("results", [report])
    if any(r["blockers"] for r in results):
        sys.exit(1)


def _print_migration(result: dict[str, Any]) -> None:
    color = "green" if not result["blockers"] else "red"
    console.print(f"[{color}]{result['readiness']}[/{color}] [cyan]{result['file']}[/cyan]")
    for blocker in result["blockers"]:
        console.print(f"  [red]blocker[/red] {blocker}")
    for warning in result["warnings"]:
        console.print(f"  [yellow]warning[/yellow] {warning}")
    for step in result["migrationSteps"]:
        console.print(f"  -> {step}")
