"""CLI interface for depsweep."""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from depsweep import __version__
from depsweep.config import build_scan_config
from depsweep.display import (
    confirm_action,
    console,
    show_delete_all_warning,
    show_deletion_outcome,
    show_matches,
    show_scanning_progress,
    show_summary,
)
from depsweep.errors import ConfigError, RootInvalid
from depsweep.models import DEFAULT_TARGET, DEFAULT_WORKERS, ScanConfig, SortKey, Summary
from depsweep.reclaimer import Reclaimer
from depsweep.scanner import check_root, scan_all
from depsweep.session import SelectionSession

log = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="depsweep",
    help="Find dependency directories such as node_modules and reclaim their disk space",
    add_completion=False,
)


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"depsweep version {__version__}")
        raise typer.Exit()


def scan_with_spinner(config: ScanConfig):
    """Run a full scan behind a spinner."""
    with show_scanning_progress() as progress:
        progress.add_task(f"Scanning for {config.target_name} in {config.root}...", total=None)
        return scan_all(config)


def list_matches(config: ScanConfig) -> None:
    """Print every match without deleting anything."""
    results, stats = scan_with_spinner(config)
    show_matches(results, config.unit)
    if stats.soft_failures:
        console.print(f"[dim]{stats.soft_failures} unreadable entries skipped[/dim]")


def delete_all(config: ScanConfig, yes: bool) -> Optional[Summary]:
    """Delete every match after a single confirmation."""
    if not yes:
        show_delete_all_warning(config.target_name)
        if not confirm_action("Proceed with deletion?"):
            console.print("[yellow]Cancelled[/yellow]")
            return None

    results, stats = scan_with_spinner(config)
    session = SelectionSession(results)
    session.finish_scan(stats)

    if not results:
        console.print("[yellow]No directories found[/yellow]")
        return session.summary()

    session.select_all()
    session.request_deletion()
    targets = session.confirm_deletion()

    console.print(f"\n[bold]Deleting {len(targets)} directories...[/bold]")

    def report(outcome):
        session.record_outcome(outcome)
        show_deletion_outcome(outcome, config.unit)

    Reclaimer(config.workers).delete_many(targets, on_outcome=report)
    return session.summary()


@app.command()
def main(
    directory: str = typer.Option(
        ".", "--directory", "-d", help="Directory to start searching from."
    ),
    full: bool = typer.Option(
        False, "--full", "-f", help="Start searching from the user's home directory."
    ),
    target: str = typer.Option(
        DEFAULT_TARGET, "--target", "-t", help="Name of the directories to search for."
    ),
    exclude: Optional[str] = typer.Option(
        None,
        "--exclude",
        "-E",
        help='Directories to skip, comma separated. Example: "ignore1, ignore2"',
    ),
    exclude_hidden: bool = typer.Option(
        False,
        "--exclude-hidden-directories",
        "-x",
        help="Do not descend into hidden directories.",
    ),
    sort: SortKey = typer.Option(
        SortKey.SIZE, "--sort", "-s", help="Sort results by size, path or last-mod."
    ),
    in_gb: bool = typer.Option(
        False, "--gb", help="Show sizes in gigabytes instead of megabytes."
    ),
    delete_everything: bool = typer.Option(
        False, "--delete-all", help="Delete every directory found, without the interactive list."
    ),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip the --delete-all confirmation."),
    list_only: bool = typer.Option(
        False, "--list", help="Print the directories found and exit."
    ),
    workers: int = typer.Option(
        DEFAULT_WORKERS, "--workers", "-w", help="Parallel workers for scanning and deleting."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Find dependency directories and choose which ones to delete."""
    setup_logging(verbose)

    try:
        config = build_scan_config(
            directory=directory,
            full=full,
            target=target,
            exclude=exclude,
            exclude_hidden=exclude_hidden,
            sort=sort,
            in_gb=in_gb,
            workers=workers,
        )
    except ConfigError as e:
        raise typer.BadParameter(str(e))

    try:
        check_root(config.root)
    except RootInvalid as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    log.debug("Starting with %s", config)

    if list_only:
        list_matches(config)
        return

    if delete_everything:
        summary = delete_all(config, yes)
    else:
        from depsweep.tui import run_tui

        summary = run_tui(config)

    if summary is None:
        return

    console.print()
    show_summary(summary, config.unit)

    if summary.all_deletions_failed:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
