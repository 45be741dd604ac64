"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console

from frontaudit import __version__
from frontaudit.config import AuditConfig
from frontaudit.errors import ConfigError
from frontaudit.tools import ToolContext

console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__, prog_name="frontaudit")
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=True, file_okay=False),
    help="Project root (default: $FRONTAUDIT_WORKSPACE or the current directory).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, root: str | None, verbose: bool) -> None:
    """frontaudit — rule-driven audits for React and Next.js projects."""
    ctx.ensure_object(dict)

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = AuditConfig.load()
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    if root:
        config.workspace = Path(root)

    ctx.obj["config"] = config
    ctx.obj["context"] = ToolContext(config=config)


def _register_commands() -> None:
    from frontaudit.cli.check import check  # noqa: F811
    from frontaudit.cli.info import info  # noqa: F811
    from frontaudit.cli.review import migration, quality  # noqa: F811
    from frontaudit.cli.rules import rules  # noqa: F811
    from frontaudit.cli.server import server  # noqa: F811

    main.add_command(check)
    main.add_command(rules)
    main.add_command(info)
    main.add_command(quality)
    main.add_command(migration)
    main.add_command(server)


_register_commands()
