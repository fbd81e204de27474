"""CLI entry point. Registers all subcommands."""

from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="adr-miner",
    help="adr-miner - Recover architectural decisions from git history",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Mine git history for architectural decisions and curate them as ADRs.

    [bold cyan]Examples:[/bold cyan]

      adr-miner mine

      adr-miner list --status draft

      adr-miner confirm DEC-1A2B3C4 --by alice

      adr-miner export --out docs/adr
    """
    if version:
        console.print(f"[bold cyan]adr-miner[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    # Store resolved path in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["path"] = Path(path) if path else Path.cwd()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


# Import subcommands to register them
from .mine import mine as _mine  # noqa: F401, E402
from .status import status as _status  # noqa: F401, E402
from .browse import (  # noqa: F401, E402
    for_file as _for_file,
    list_decisions as _list,
    show as _show,
    timeline as _timeline,
)
from .curate import confirm as _confirm, reject as _reject  # noqa: F401, E402
from .export import export as _export  # noqa: F401, E402
