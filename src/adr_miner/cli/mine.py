"""Mine CLI command -- run the pipeline and store the decisions."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel
from rich.table import Table

from ..exceptions import AdrMinerError
from ..logging_config import setup_logging, verbosity_from_flags
from ..mining import DecisionMiner, MiningResult
from ..serializers import result_to_dict
from ..storage import DecisionStore
from . import app
from ._common import console, parse_date, project_root, resolve_config, styled_confidence


@app.command()
def mine(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(
        None,
        help="Repository to mine (default: --path or current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    since: Optional[str] = typer.Option(None, "--since", "-s", help="Start date (ISO format)"),
    until: Optional[str] = typer.Option(None, "--until", "-u", help="End date (ISO format)"),
    max_commits: Optional[int] = typer.Option(
        None, "--max-commits", "-n", help="Maximum commits to walk", min=1
    ),
    min_confidence: Optional[float] = typer.Option(
        None, "--min-confidence", help="Minimum confidence (0-1)", min=0.0, max=1.0
    ),
    min_cluster_size: Optional[int] = typer.Option(
        None, "--min-cluster-size", help="Minimum commits per decision", min=1
    ),
    include_merges: Optional[bool] = typer.Option(
        None, "--include-merges", help="Include merge commits", show_default=False
    ),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-e", help="Glob of paths to ignore (repeatable)"
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output in machine-readable JSON format"
    ),
    no_save: bool = typer.Option(
        False, "--no-save", help="Do not write decisions to .adr-miner/"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
):
    """
    Analyze git history and mine architectural decisions.

    [bold cyan]Examples:[/bold cyan]

      adr-miner mine

      adr-miner mine --since 2024-01-01 --min-confidence 0.6

      adr-miner mine /path/to/repo --exclude "docs/*" --json
    """
    logger = setup_logging(verbosity_from_flags(verbose, quiet) or "normal")
    root = path.resolve() if path else project_root(ctx)

    try:
        settings = resolve_config(
            config,
            verbose=verbose,
            quiet=quiet,
            max_commits=max_commits,
            min_confidence=min_confidence,
            min_cluster_size=min_cluster_size,
            include_merge_commits=include_merges,
            exclude_paths=list(exclude) if exclude else None,
        )
        # Config files and ADR_MINER_VERBOSITY may set a level the flags did not
        logger = setup_logging(settings.verbosity)
        start = parse_date(since, "--since")
        end = parse_date(until, "--until")

        if not json_output:
            console.print(f"[bold]Mining decisions from[/bold] {root}")

        result = DecisionMiner(settings).mine(str(root), since=start, until=end)

        if not no_save and not result.failed:
            store = DecisionStore(root, settings.decisions_dir)
            store.save_result(result)

        if json_output:
            print(json.dumps(result_to_dict(result), indent=2))
        else:
            _output_rich(result, saved=not no_save)

        if result.failed:
            raise typer.Exit(1)

    except typer.Exit:
        raise

    except typer.BadParameter:
        raise

    except AdrMinerError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Mining interrupted by user")
        console.print("\n[yellow]Mining interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during mining")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


def _output_rich(result: MiningResult, saved: bool) -> None:
    """Human-readable summary of a run."""
    for error in result.errors:
        color = "red" if error.is_fatal else "yellow"
        console.print(f"[{color}]{error.type.value}:[/{color}] {error.message}")
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")

    if result.failed:
        return

    summary = result.summary
    console.print(
        Panel(
            f"Commits analyzed: [bold]{summary.total_commits_analyzed}[/bold]\n"
            f"Significant commits: [bold]{summary.significant_commits}[/bold]\n"
            f"Decisions mined: [bold green]{summary.total_decisions}[/bold green]\n"
            f"Duration: {summary.mining_duration:.1f}s",
            title="Mining summary",
            expand=False,
        )
    )

    if not result.decisions:
        console.print("[yellow]No decisions met the confidence threshold.[/yellow]")
        return

    table = Table(title="Mined Decisions", show_lines=False, pad_edge=True)
    table.add_column("ID", style="bold")
    table.add_column("Category", style="cyan")
    table.add_column("Confidence")
    table.add_column("Commits", justify="right")
    table.add_column("Title")

    ordered = sorted(result.decisions, key=lambda d: (-d.confidence_score, d.id))
    for d in ordered:
        table.add_row(
            d.id,
            d.category.value,
            styled_confidence(d.confidence.value, d.confidence_score),
            str(d.cluster.size),
            d.title,
        )

    console.print()
    console.print(table)
    console.print()
    if saved:
        console.print("[dim]Next steps:[/dim]")
        console.print("  [bold]adr-miner list[/bold]          browse mined decisions")
        console.print("  [bold]adr-miner show ID[/bold]       view one decision")
        console.print("  [bold]adr-miner confirm ID[/bold]    confirm a draft decision")
        console.print("  [bold]adr-miner export[/bold]        write markdown ADRs")
