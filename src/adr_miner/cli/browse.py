"""List, show, for-file and timeline CLI commands -- browse stored decisions."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..categories import DecisionCategory
from ..exceptions import DecisionNotFoundError
from ..synthesis.models import DecisionStatus
from . import app
from ._common import console, open_store, styled_confidence, styled_status

_MAX_EVIDENCE = 5


@app.command("list")
def list_decisions(
    ctx: typer.Context,
    category: Optional[DecisionCategory] = typer.Option(
        None, "--category", help="Filter by category"
    ),
    status: Optional[DecisionStatus] = typer.Option(None, "--status", help="Filter by status"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum results", min=1, max=1000),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output in machine-readable JSON format"
    ),
):
    """
    List mined decisions, highest confidence first.

    [bold cyan]Examples:[/bold cyan]

      adr-miner list

      adr-miner list --status draft --category technology-adoption
    """
    store = open_store(ctx, config)
    records = store.list(category=category, status=status, limit=limit)

    if json_output:
        print(json.dumps(records, indent=2))
        return

    if not records:
        console.print("[yellow]No decisions match.[/yellow]")
        return

    table = Table(title="Decisions", show_lines=False, pad_edge=True)
    table.add_column("ID", style="bold")
    table.add_column("Status")
    table.add_column("Category", style="cyan")
    table.add_column("Confidence")
    table.add_column("Date", style="green")
    table.add_column("Title")

    for r in records:
        date_range = r.get("date_range") or {}
        table.add_row(
            r["id"],
            styled_status(r["status"]),
            r["category"],
            styled_confidence(r["confidence"], r["confidence_score"]),
            date_range.get("start", "")[:10],
            escape(r["title"]),
        )
    console.print()
    console.print(table)
    console.print()


@app.command()
def show(
    ctx: typer.Context,
    decision_id: str = typer.Argument(..., metavar="ID", help="Decision id, e.g. DEC-1A2B3C4"),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output in machine-readable JSON format"
    ),
):
    """
    Show one decision with its ADR text, evidence and commits.
    """
    store = open_store(ctx, config)
    try:
        record = store.load(decision_id)
    except DecisionNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps(record, indent=2))
        return

    _output_rich(record)


@app.command("for-file")
def for_file(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="File or directory path, relative to the repository root"),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output in machine-readable JSON format"
    ),
):
    """
    Show the decisions whose commits touched a file.

    [bold cyan]Examples:[/bold cyan]

      adr-miner for-file src/auth/middleware.py

      adr-miner for-file src/auth --json
    """
    store = open_store(ctx, config)
    records = store.for_file(file)

    if json_output:
        print(json.dumps({"file": file, "decisions": records}, indent=2))
        return

    if not records:
        console.print(f"[yellow]No decisions touched {escape(file)}.[/yellow]")
        return

    console.print()
    console.print(f"[bold]Decisions affecting {escape(file)}[/bold]")
    for r in records:
        console.print(
            f"  {styled_status(r['status'])} [bold]{r['id']}[/bold] "
            f"[cyan]{r['category']}[/cyan] {escape(r['title'])}"
        )
    console.print()


@app.command()
def timeline(
    ctx: typer.Context,
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum results", min=1, max=1000),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output in machine-readable JSON format"
    ),
):
    """
    Show decisions by month, most recent first.
    """
    store = open_store(ctx, config)
    records = store.timeline(limit=limit)

    if json_output:
        print(json.dumps({"timeline": records}, indent=2))
        return

    if not records:
        console.print("[yellow]No decisions stored.[/yellow]")
        return

    last_month = None
    for r in records:
        ended = datetime.fromisoformat(r["date_range"]["end"])
        month = ended.strftime("%B %Y")
        if month != last_month:
            console.print()
            console.print(f"[bold cyan]{month}[/bold cyan]")
            last_month = month
        console.print(
            f"  {ended.day:>2} {styled_status(r['status'])} {r['id']}: {escape(r['title'])} "
            f"[dim]({r['category']})[/dim]"
        )
    console.print()


def _output_rich(r: dict[str, Any]) -> None:
    adr = r.get("adr", {})
    date_range = r.get("date_range") or {}

    console.print()
    console.print(f"[bold]{r['id']}: {escape(r['title'])}[/bold]")
    console.print()
    console.print(f"  Status:     {styled_status(r['status'])}")
    console.print(f"  Category:   [cyan]{r['category']}[/cyan]")
    console.print(f"  Confidence: {styled_confidence(r['confidence'], r['confidence_score'])}")
    if date_range:
        console.print(
            f"  Date:       {date_range['start'][:10]} to {date_range['end'][:10]} "
            f"({r.get('duration', '')})"
        )
    if r.get("confirmed_by"):
        console.print(f"  Confirmed:  {escape(r['confirmed_by'])}")
    if r.get("tags"):
        console.print(f"  Tags:       {escape(', '.join(r['tags']))}")

    console.print()
    console.print("[bold]Context[/bold]")
    console.print(f"  {escape(adr.get('context', ''))}")
    console.print()
    console.print("[bold]Decision[/bold]")
    console.print(f"  {escape(adr.get('decision', ''))}")
    console.print()
    console.print("[bold]Consequences[/bold]")
    for consequence in adr.get("consequences", []):
        console.print(f"  - {escape(consequence)}")

    evidence = adr.get("evidence", [])
    if evidence:
        console.print()
        console.print("[bold]Evidence[/bold]")
        for e in evidence[:_MAX_EVIDENCE]:
            console.print(f"  [dim]{e['type']}[/dim] {escape(e['description'])}")

    commits = r.get("cluster", {}).get("commits", [])
    if commits:
        console.print()
        console.print(f"[bold]Commits[/bold] ({len(commits)})")
        for c in commits[:10]:
            console.print(f"  [cyan]{c['short_hash']}[/cyan] {escape(c['subject'])}")

    if r.get("notes"):
        console.print()
        console.print("[bold]Notes[/bold]")
        console.print(f"  {escape(r['notes'])}")
    console.print()
