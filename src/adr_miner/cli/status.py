"""Status CLI command -- summary of the stored decisions."""

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.table import Table

from ..exceptions import StorageError
from . import app
from ._common import STATUS_STYLE, console, open_store


@app.command()
def status(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output in machine-readable JSON format"
    ),
):
    """
    Show the summary of the last mining run and the curation status.

    [bold cyan]Examples:[/bold cyan]

      adr-miner status

      adr-miner status --json
    """
    store = open_store(ctx, config)
    try:
        index = store.load_index()
    except StorageError as e:
        console.print(f"[red]Error reading decisions:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps(index["summary"], indent=2))
        return

    _output_rich(index["summary"])


def _output_rich(summary: dict[str, Any]) -> None:
    date_range = summary.get("date_range") or {}
    console.print()
    console.print("[bold]Decision Mining Summary[/bold]")
    console.print(f"  Decisions:           {summary.get('total_decisions', 0)}")
    console.print(f"  Commits analyzed:    {summary.get('total_commits_analyzed', 0)}")
    console.print(f"  Significant commits: {summary.get('significant_commits', 0)}")
    console.print(f"  Avg cluster size:    {summary.get('avg_cluster_size', 0.0):.1f}")
    if date_range:
        console.print(
            f"  History covered:     {date_range['start'][:10]} to {date_range['end'][:10]}"
        )
    console.print()

    table = Table(show_header=True, pad_edge=True)
    table.add_column("Status")
    table.add_column("Count", justify="right")
    for name, count in summary.get("by_status", {}).items():
        style = STATUS_STYLE.get(name, "white")
        table.add_row(f"[{style}]{name}[/{style}]", str(count))
    console.print(table)

    categories = {k: v for k, v in summary.get("by_category", {}).items() if v}
    if categories:
        table = Table(show_header=True, pad_edge=True)
        table.add_column("Category", style="cyan")
        table.add_column("Count", justify="right")
        for name, count in sorted(categories.items(), key=lambda item: -item[1]):
            table.add_row(name, str(count))
        console.print(table)

    top_dependencies = summary.get("top_dependencies", [])
    if top_dependencies:
        names = ", ".join(d["dependency"] for d in top_dependencies[:5])
        console.print(f"  Top dependencies: {names}")
    console.print()
