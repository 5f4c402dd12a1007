"""CLI commands for inspecting registered checkers and preconditions."""

from __future__ import annotations

import click
from rich.table import Table

from testgate.cli.console import console
from testgate.cli.context import ExitCode
from testgate.engine import Gate
from testgate.exceptions import DeclarationError
from testgate.metadata import GatingSpec
from testgate.registry import checker_registry, precondition_registry


def _first_doc_line(component: type) -> str:
    doc = component.__doc__ or ""
    return doc.strip().splitlines()[0] if doc.strip() else ""


@click.command()
def checkers() -> None:
    """List registered checkers and preconditions."""
    table = Table(show_lines=False)
    for header in ("Kind", "Name", "Type", "Description"):
        table.add_column(header, no_wrap=header in ("Kind", "Name"))
    for kind, registry in (
        ("checker", checker_registry),
        ("precondition", precondition_registry),
    ):
        for name, component in registry.items():
            table.add_row(
                kind, name, component.__qualname__, _first_doc_line(component)
            )
    console.print(table)


@click.command()
@click.argument("name")
@click.argument("arguments", nargs=-1)
def check(name: str, arguments: tuple[str, ...]) -> None:
    """Evaluate one registered checker against the current environment.

    Exits 0 when satisfied and 1 when not.

    Examples:
        testgate check os linux
        testgate check executable git docker
    """
    try:
        allowed = Gate().should_run(GatingSpec(checker=name, arguments=arguments))
    except DeclarationError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(ExitCode.DECLARATION_ERROR) from e

    click.echo(f"{name}: {'satisfied' if allowed else 'not satisfied'}")
    if not allowed:
        raise SystemExit(ExitCode.FAILURE)
