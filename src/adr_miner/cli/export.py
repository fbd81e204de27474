"""Export CLI command -- write stored decisions as markdown ADRs."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..exceptions import StorageError
from . import app
from ._common import console, open_store


@app.command()
def export(
    ctx: typer.Context,
    out: Optional[Path] = typer.Option(
        None, "--out", "-o", help="Output directory (default: docs/adr)", file_okay=False
    ),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output in machine-readable JSON format"
    ),
):
    """
    Export decisions as markdown ADRs (NNNN-title.md).
    """
    store = open_store(ctx, config)
    try:
        written = store.export_adrs(out)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    directory = out if out is not None else store.root_dir / "docs" / "adr"
    if json_output:
        print(json.dumps({"exported": len(written), "directory": str(directory)}))
        return
    console.print(f"[green]✓[/green] Exported {len(written)} decisions to {directory}")
