"""CLI command for ``testgate run``."""

from __future__ import annotations

import json
from typing import Any

import click
from rich.table import Table

from testgate.cli.console import console
from testgate.cli.context import CLIContext, ExitCode
from testgate.cli.targets import load_targets
from testgate.engine import (
    DefaultHost,
    EventKind,
    ExecutionOutcome,
    GatedClassRunner,
    OutcomeStatus,
    RecordingNotifier,
)
from testgate.exceptions import DeclarationError
from testgate.logging import get_logger

logger = get_logger(__name__)

_STATUS_STYLES: dict[str, str] = {
    "passed": "green",
    "failed": "red",
    "skipped": "yellow",
}


def _summarize(
    outcomes: list[ExecutionOutcome], notifier: RecordingNotifier
) -> list[dict[str, Any]]:
    rows = []
    for outcome in outcomes:
        description = outcome.description
        kinds = notifier.kinds_for(description)
        errors = [
            f.message for f in notifier.failures if f.description == description
        ]
        if outcome.skipped:
            status = "skipped"
        elif EventKind.FAILURE in kinds:
            status = "failed"
        elif EventKind.IGNORED in kinds:
            status = "skipped"
        else:
            status = "passed"
        reason = None if outcome.status is OutcomeStatus.RAN else outcome.status.value
        rows.append(
            {
                "test": description.display_name,
                "status": status,
                "reason": reason,
                "errors": errors,
            }
        )
    return rows


def _build_table(rows: list[dict[str, Any]]) -> Table:
    table = Table(title="testgate", show_lines=False)
    for header in ("Test", "Status", "Details"):
        table.add_column(header)
    for row in rows:
        style = _STATUS_STYLES[row["status"]]
        details = "; ".join(row["errors"]) or (row["reason"] or "")
        table.add_row(
            row["test"], f"[{style}]{row['status']}[/{style}]", details
        )
    return table


@click.command()
@click.argument("targets", nargs=-1, required=True)
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.pass_context
def run(ctx: click.Context, targets: tuple[str, ...], fmt: str) -> None:
    """Run test classes through gating and precondition chains.

    TARGET is ``package.module:Class`` or ``package.module``.

    Examples:
        testgate run tests.test_db:DatabaseSuite
        testgate run tests.test_db --format json
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    host = DefaultHost(method_prefix=cli_ctx.config.method_prefix)
    test_classes = load_targets(targets, cli_ctx.config.method_prefix)

    notifier = RecordingNotifier()
    outcomes: list[ExecutionOutcome] = []
    try:
        for test_class in test_classes:
            outcomes.extend(GatedClassRunner(test_class, host=host).run(notifier))
    except DeclarationError as e:
        logger.error("declaration_error", error=e.message)
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(ExitCode.DECLARATION_ERROR) from e

    rows = _summarize(outcomes, notifier)
    if fmt == "json":
        click.echo(json.dumps(rows, indent=2))
    else:
        console.print(_build_table(rows))
        counts = {s: sum(r["status"] == s for r in rows) for s in _STATUS_STYLES}
        console.print(
            f"{counts['passed']} passed, {counts['failed']} failed, "
            f"{counts['skipped']} skipped"
        )

    if any(row["status"] == "failed" for row in rows):
        raise SystemExit(ExitCode.FAILURE)
