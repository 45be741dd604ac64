"""CLI commands: frontaudit rules — list, toggle and validate rules."""

from __future__ import annotations

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from frontaudit.rules.loader import validate_ruleset_file
from frontaudit.rules.models import CHECK_CATEGORIES, Framework
from frontaudit.tools import handle_manage_rules, run_tool

console = Console(stderr=True)

_CATEGORY = click.Choice([c.value for c in CHECK_CATEGORIES])
_FRAMEWORK = click.Choice([Framework.NEXTJS.value, Framework.REACT.value])


@click.group()
def rules() -> None:
    """Inspect and manage rule sets."""


@rules.command("list")
@click.argument("category", type=_CATEGORY)
@click.option(
    "--framework",
    "-f",
    type=_FRAMEWORK,
    default=None,
    help="Rule set framework (default: detected from the project).",
)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON to stdout.")
@click.pass_context
def list_rules(
    ctx: click.Context,
    category: str,
    framework: str | None,
    as_json: bool,
) -> None:
    """List the rules of a check category."""
    report = run_tool(
        handle_manage_rules,
        category=category,
        action="list",
        context=ctx.obj["context"],
        framework=Framework(framework) if framework else None,
    )
    if report.get("isError"):
        console.print(f"[red]Error:[/red] {report['error']}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report, indent=2))
        return

    table = Table(
        title=f"{report['ruleset']} ({report['enabledRules']}/{report['totalRules']} enabled)"
    )
    table.add_column("Rule", style="cyan")
    table.add_column("Severity")
    table.add_column("Enabled", justify="center")
    table.add_column("Title")

    for rule in report["rules"]:
        table.add_row(
            rule["id"],
            rule["severity"],
            "[green]yes[/green]" if rule["enabled"] else "[dim]no[/dim]",
            rule["title"],
        )
    console.print(table)


@rules.command()
@click.argument("category", type=_CATEGORY)
@click.argument("rule_id")
@click.pass_context
def enable(ctx: click.Context, category: str, rule_id: str) -> None:
    """Enable a rule for this project."""
    _toggle(ctx, category, rule_id, "enable")


@rules.command()
@click.argument("category", type=_CATEGORY)
@click.argument("rule_id")
@click.pass_context
def disable(ctx: click.Context, category: str, rule_id: str) -> None:
    """Disable a rule for this project."""
    _toggle(ctx, category, rule_id, "disable")


@rules.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True))
def validate(files: tuple[str, ...]) -> None:
    """Validate one or more rule files."""
    failed = 0
    for path in files:
        problems = validate_ruleset_file(path)
        if not problems:
            console.print(f"[green]✓[/green] {path}")
            continue
        failed += 1
        console.print(f"[red]✗[/red] {path}")
        for problem in problems:
            console.print(f"    {problem}")

    if failed:
        console.print(f"\n[red]{failed} invalid rule file(s)[/red]")
        sys.exit(1)


def _toggle(ctx: click.Context, category: str, rule_id: str, action: str) -> None:
    result = run_tool(
        handle_manage_rules,
        category=category,
        action=action,
        rule_id=rule_id,
        context=ctx.obj["context"],
    )
    if result.get("isError") or not result.get("success"):
        console.print(f"[red]Error:[/red] {result['error']}")
        sys.exit(1)
    console.print(f"[green]{result['message']}[/green]")
