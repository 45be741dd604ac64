"""CLI command: frontaudit check [CATEGORY] [PATH] — run rule checks."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from frontaudit.rules.models import CHECK_CATEGORIES, Severity
from frontaudit.tools import handle_check, run_tool

console = Console(stderr=True)

_SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.HIGH: "magenta",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
}

_CHOICES = [c.value for c in CHECK_CATEGORIES] + ["all"]


@click.command()
@click.argument("category", type=click.Choice(_CHOICES), default="all")
@click.argument("path", required=False, type=click.Path(exists=True))
@click.option(
    "--include-tests",
    is_flag=True,
    help="Also scan *.test.* and *.spec.* files.",
)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON to stdout.")
@click.pass_context
def check(
    ctx: click.Context,
    category: str,
    path: str | None,
    include_tests: bool,
    as_json: bool,
) -> None:
    """Check a file, a directory or the whole project."""
    context = ctx.obj["context"]
    if path:
        path = str(Path(path).resolve())
    categories = [c.value for c in CHECK_CATEGORIES] if category == "all" else [category]

    reports: dict[str, dict[str, Any]] = {}
    for name in categories:
        report = run_tool(
            handle_check,
            category=name,
            file_path=path,
            context=context,
            include_tests=include_tests or None,
        )
        if report.get("isError"):
            console.print(f"[red]Error:[/red] {report['error']}")
            sys.exit(1)
        reports[name] = report

    if as_json:
        payload = reports[category] if category != "all" else reports
        click.echo(json.dumps(payload, indent=2))
    else:
        target = path or str(context.root)
        console.print(f"[bold]frontaudit[/bold] checking [cyan]{target}[/cyan]\n")
        for name, report in reports.items():
            _print_report(name, report, str(context.root))

    critical = sum(_critical_count(r) for r in reports.values())
    if critical > 0:
        if not as_json:
            console.print(f"\n[red]{critical} critical issue(s)[/red]")
        sys.exit(1)


def _file_results(report: dict[str, Any]) -> list[dict[str, Any]]:
    # A project report nests per-file results; a file report is one itself
    if "results" in report:
        return report["results"]
    return [report]


def _critical_count(report: dict[str, Any]) -> int:
    if "severityCounts" in report:
        return report["severityCounts"].get(Severity.CRITICAL.value, 0)
    return sum(
        1 for i in report.get("issues", []) if i["severity"] == Severity.CRITICAL.value
    )


def _print_report(category: str, report: dict[str, Any], base_dir: str) -> None:
    rows = [
        (file_result["file"], issue)
        for file_result in _file_results(report)
        for issue in file_result["issues"]
    ]

    if not rows:
        console.print(f"[green]{category}:[/green] {report['summary']}{_timing(report)}")
        return

    # Critical first, then file, then line
    rows.sort(
        key=lambda row: (
            Severity(row[1]["severity"]).rank,
            row[0],
            row[1].get("line", 0),
        )
    )

    table = Table(title=category, show_lines=False)
    table.add_column("Severity", style="bold", width=10)
    table.add_column("File", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Rule")
    table.add_column("Message", max_width=60)

    for file_path, issue in rows:
        severity = Severity(issue["severity"])
        color = _SEVERITY_COLORS[severity]
        table.add_row(
            f"[{color}]{severity.value}[/{color}]",
            _shorten_path(file_path, base_dir),
            str(issue.get("line", "")),
            issue["ruleId"],
            issue["message"],
        )

    console.print(table)
    console.print(f"{report['summary']}{_timing(report)}")
    console.print()


def _timing(report: dict[str, Any]) -> str:
    if "duration" not in report:
        return ""
    return f" in {report['duration']:.2f}s"


def _shorten_path(file_path: str, base_dir: str) -> str:
    """Shorten file path relative to the project root."""
    if file_path.startswith(base_dir):
        return file_path[len(base_dir) :].lstrip("/")
    return file_path
