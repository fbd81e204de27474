"""Shared CLI helpers."""

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import MiningConfig, load_config
from ..exceptions import AdrMinerError
from ..storage import DecisionStore

console = Console()

STATUS_STYLE = {
    "draft": "yellow",
    "confirmed": "green",
    "superseded": "dim",
    "rejected": "red",
}

CONFIDENCE_STYLE = {
    "high": "green",
    "medium": "yellow",
    "low": "red",
}


def resolve_config(
    config: Optional[Path] = None,
    verbose: bool = False,
    quiet: bool = False,
    **overrides,
) -> MiningConfig:
    """Build config from CLI options. Unset options leave file/env values alone."""
    return load_config(config_file=config, verbose=verbose, quiet=quiet, **overrides)


def project_root(ctx: typer.Context) -> Path:
    obj = ctx.obj or {}
    return Path(obj.get("path", Path.cwd())).resolve()


def open_store(ctx: typer.Context, config: Optional[Path] = None) -> DecisionStore:
    """Store for the project root, exiting with a hint when nothing was mined yet."""
    try:
        settings = resolve_config(config)
    except AdrMinerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    store = DecisionStore(project_root(ctx), settings.decisions_dir)
    if not store.exists():
        console.print(
            "[yellow]No mined decisions found.[/yellow] "
            "Run [bold]adr-miner mine[/bold] first."
        )
        raise typer.Exit(1)
    return store


def parse_date(value: Optional[str], option: str) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"expected an ISO date like 2024-01-31, got {value!r}", param_hint=option)


def styled_status(status: str) -> str:
    style = STATUS_STYLE.get(status, "white")
    return f"[{style}]{status}[/{style}]"


def styled_confidence(level: str, score: float) -> str:
    style = CONFIDENCE_STYLE.get(level, "white")
    return f"[{style}]{level}[/{style}] ({score * 100:.0f}%)"
