# src/undobucket/cli.py
"""
undobucket Command Line Interface (CLI).

This module implements a small terminal interface using `typer` and `rich`
to drive a bucket through a scripted sequence of operations and show how its
items, epoch and history evolve.

Operations
----------
Each positional OP is one of:

- ``add:VALUE``            append one item
- ``add-many:V1,V2,...``   append several items in one call
- ``poll``                 remove the oldest item
- ``undo``                 restore the state before the last mutation
- ``clear``                drop every item

Usage
-----
    $ undobucket run add:apple add:banana add:cherry poll undo --max-items 2
    $ undobucket run add-many:a,b,c undo --batch-undo --json
    $ undobucket config
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from undobucket.core.bucket import Bucket
from undobucket.core.contracts.limits import BucketLimits, OverflowPolicy
from undobucket.core.settings import BucketSettings, get_logger, load_settings

# Ensure env vars (like BUCKET_MAX_ITEMS) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="undobucket: a bounded, undoable, epoch-versioned container.",
    rich_markup_mode="markdown",
)
console = Console()


@dataclass(frozen=True)
class StepRecord:
    """Outcome of a single scripted operation."""

    step: int
    op: str
    outcome: str
    items: list[str]
    epoch: int
    history: int


# --------------------------------------------------------------------------- #
# Helpers: Configuration
# --------------------------------------------------------------------------- #


def _settings_or_exit() -> BucketSettings:
    """
    Helper: Load the configured defaults, or exit with code 2 if they are invalid.

    Also configures the package logger, so library DEBUG logs (evictions,
    undos) follow `LOG_LEVEL`.
    """
    try:
        s = load_settings()
    except ValueError as e:
        console.print(f"[bold red]Invalid configuration:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2) from e
    get_logger()
    return s


# --------------------------------------------------------------------------- #
# Helpers: Parsing & Execution
# --------------------------------------------------------------------------- #


def _apply(bucket: Bucket[str], op: str) -> str:
    """
    Helper: Apply one textual operation to ``bucket`` and describe the outcome.

    Raises
    ------
    ValueError
        If ``op`` is not a recognised operation.
    """
    verb, sep, arg = op.partition(":")
    verb = verb.strip().lower()

    if verb == "add" and sep:
        return "added" if bucket.add_item(arg) else "rejected"
    if verb == "add-many" and sep:
        values = [v for v in arg.split(",") if v]
        accepted = bucket.add_items(values)
        return f"added {accepted}/{len(values)}"
    if verb == "poll" and not sep:
        item = bucket.poll()
        return "empty" if item is None else f"polled {item}"
    if verb == "undo" and not sep:
        return "restored" if bucket.undo() else "nothing to undo"
    if verb == "clear" and not sep:
        return "cleared" if bucket.clear() else "already empty"

    raise ValueError(f"Unknown operation: {op!r}")


def _run_script(bucket: Bucket[str], ops: list[str]) -> list[StepRecord]:
    """Helper: Apply ``ops`` in order, recording the bucket state after each."""
    records: list[StepRecord] = []
    for i, op in enumerate(ops, start=1):
        outcome = _apply(bucket, op)
        records.append(
            StepRecord(
                step=i,
                op=op,
                outcome=outcome,
                items=list(bucket),
                epoch=bucket.epoch,
                history=bucket.history_len,
            )
        )
    return records


def _render_table(bucket: Bucket[str], records: list[StepRecord]) -> None:
    """Helper: Render the step log as a Rich table."""
    table = Table(title=f"Bucket [bold]{escape(bucket.name)}[/bold]")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Operation", style="cyan")
    table.add_column("Outcome", style="magenta")
    table.add_column("Items")
    table.add_column("Epoch", justify="right", style="green")
    table.add_column("History", justify="right")

    for rec in records:
        table.add_row(
            str(rec.step),
            escape(rec.op),
            escape(rec.outcome),
            escape(", ".join(rec.items)) or "[dim]-[/dim]",
            str(rec.epoch),
            str(rec.history),
        )
    console.print(table)


def _as_payload(bucket: Bucket[str], records: list[StepRecord]) -> dict[str, Any]:
    """Helper: Build the JSON document emitted by ``run --json``."""
    return {
        "name": bucket.name,
        "limits": bucket.limits.model_dump(mode="json"),
        "steps": [
            {
                "step": r.step,
                "op": r.op,
                "outcome": r.outcome,
                "items": r.items,
                "epoch": r.epoch,
                "history": r.history,
            }
            for r in records
        ],
        "final": {
            "items": list(bucket),
            "epoch": bucket.epoch,
            "history": bucket.history_len,
        },
    }


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def run(
    ops: Annotated[
        list[str],
        typer.Argument(
            help="Operations to apply in order (add:X, add-many:X,Y, poll, undo, clear)."
        ),
    ],
    name: Annotated[str, typer.Option("--name", "-n", help="Bucket name.")] = "cli",
    max_items: Annotated[
        int | None,
        typer.Option(
            "--max-items", help="Item capacity (default: BUCKET_MAX_ITEMS or unbounded)."
        ),
    ] = None,
    max_history: Annotated[
        int | None,
        typer.Option(
            "--max-history", help="History depth (default: BUCKET_MAX_HISTORY or unbounded)."
        ),
    ] = None,
    overflow: Annotated[
        OverflowPolicy | None,
        typer.Option("--overflow", help="Capacity policy (default: BUCKET_OVERFLOW or evict)."),
    ] = None,
    batch_undo: Annotated[
        bool | None,
        typer.Option(
            "--batch-undo/--no-batch-undo",
            help="Record add-many as one history step (default: BUCKET_BATCH_UNDO).",
        ),
    ] = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Emit the step log as JSON instead of a table.")
    ] = False,
) -> None:
    """
    Apply a script of operations to a fresh bucket and show each step.

    Options that are not given fall back to the configured defaults.
    """
    defaults = _settings_or_exit()
    try:
        limits = BucketLimits(
            max_items=max_items if max_items is not None else defaults.max_items,
            max_history=max_history if max_history is not None else defaults.max_history,
            overflow=overflow if overflow is not None else defaults.overflow,
            batch_undo=batch_undo if batch_undo is not None else defaults.batch_undo,
        )
    except ValueError as e:
        console.print(f"[bold red]Invalid limits:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2) from e

    bucket: Bucket[str] = Bucket.from_limits(name, limits)

    try:
        records = _run_script(bucket, ops)
    except ValueError as e:
        console.print(f"[bold red]{escape(str(e))}[/bold red]")
        raise typer.Exit(code=2) from e

    if as_json:
        typer.echo(json.dumps(_as_payload(bucket, records), indent=2))
    else:
        _render_table(bucket, records)


@app.command()  # type: ignore[misc]
def config() -> None:
    """Print the effective configuration (environment and `.env` files)."""
    s = _settings_or_exit()
    table = Table(title="undobucket configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("environment", s.environment)
    table.add_row("log_level", s.log_level)
    table.add_row("max_items", "unbounded" if s.max_items is None else str(s.max_items))
    table.add_row("max_history", "unbounded" if s.max_history is None else str(s.max_history))
    table.add_row("overflow", s.overflow.value)
    table.add_row("batch_undo", str(s.batch_undo))
    console.print(table)


if __name__ == "__main__":
    app()
