"""Confirm and reject CLI commands -- curate draft decisions."""

from pathlib import Path
from typing import Optional

import typer

from ..exceptions import StorageError
from ..synthesis.models import DecisionStatus
from . import app
from ._common import console, open_store


def _transition(
    ctx: typer.Context,
    decision_id: str,
    status: DecisionStatus,
    config: Optional[Path],
    confirmed_by: Optional[str] = None,
    notes: Optional[str] = None,
) -> None:
    store = open_store(ctx, config)
    try:
        record = store.update_status(decision_id, status, confirmed_by=confirmed_by, notes=notes)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Decision [bold]{record['id']}[/bold] {status.value}")


@app.command()
def confirm(
    ctx: typer.Context,
    decision_id: str = typer.Argument(..., metavar="ID", help="Decision id"),
    by: Optional[str] = typer.Option(None, "--by", help="Who confirmed the decision"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes to attach"),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
):
    """
    Confirm a draft decision.

    [bold cyan]Examples:[/bold cyan]

      adr-miner confirm DEC-1A2B3C4 --by alice
    """
    _transition(ctx, decision_id, DecisionStatus.CONFIRMED, config, confirmed_by=by, notes=notes)


@app.command()
def reject(
    ctx: typer.Context,
    decision_id: str = typer.Argument(..., metavar="ID", help="Decision id"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Why the decision was rejected"),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
):
    """
    Reject a draft decision (not an actual architectural decision).
    """
    _transition(ctx, decision_id, DecisionStatus.REJECTED, config, notes=notes)
