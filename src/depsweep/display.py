"""Rich terminal display for depsweep."""

from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from depsweep.models import DeletionOutcome, Match, SizeUnit, Summary

console = Console()


def format_size(size_bytes: int, unit: SizeUnit = SizeUnit.MB) -> str:
    """Format bytes in binary megabytes or gigabytes."""
    shift = 30 if unit == SizeUnit.GB else 20
    label = "GB" if unit == SizeUnit.GB else "MB"
    return f"{size_bytes / (1 << shift):.2f}{label}"


def format_age(seconds: int) -> str:
    """Compact age: 42s, 5m, 3h, 12d."""
    if seconds < 60:
        return f"{seconds}s"
    elif seconds < 3600:
        return f"{seconds // 60}m"
    elif seconds < 86400:
        return f"{seconds // 3600}h"
    else:
        return f"{seconds // 86400}d"


def failure_label(outcome: DeletionOutcome) -> str:
    reason = outcome.reason.value if outcome.reason else "unknown"
    return f"{reason}: {outcome.detail}" if outcome.detail else reason


def show_scanning_progress() -> Progress:
    """Create a spinner for the scan phase."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def show_matches(matches: Iterable[Match], unit: SizeUnit = SizeUnit.MB) -> None:
    """Display matches as a table."""
    matches = list(matches)
    if not matches:
        console.print("[yellow]No directories found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Age", justify="right")
    table.add_column("Size", justify="right")

    total = 0
    for match in matches:
        style = "yellow" if match.is_dangerous else None
        table.add_row(
            escape(str(match.path)),
            format_age(match.age_seconds()),
            format_size(match.size_bytes, unit),
            style=style,
        )
        total += match.size_bytes

    console.print(table)
    console.print(f"[bold]{len(matches)} directories, {format_size(total, unit)} total[/bold]")


def show_deletion_outcome(outcome: DeletionOutcome, unit: SizeUnit = SizeUnit.MB) -> None:
    """Display the result of a single deletion."""
    if outcome.success:
        freed = format_size(outcome.freed_bytes, unit)
        console.print(f"  [green]✓[/green] {escape(str(outcome.path))}: {freed} freed")
    else:
        console.print(f"  [red]✗[/red] {escape(str(outcome.path))}: {escape(failure_label(outcome))}")


def show_summary(summary: Summary, unit: SizeUnit = SizeUnit.MB) -> None:
    """Display the end-of-run summary."""
    table = Table(show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Directories found", str(summary.total_matches))
    table.add_row("Selected for deletion", str(summary.total_selected))
    table.add_row("Space freed", f"[bold green]{format_size(summary.total_freed_bytes, unit)}[/bold green]")
    if summary.soft_scan_failures:
        table.add_row("[yellow]Unreadable during scan[/yellow]", str(summary.soft_scan_failures))
    if summary.deletion_failure_count:
        table.add_row("[red]Failed deletions[/red]", str(summary.deletion_failure_count))

    console.print(Panel(table, title="Summary", border_style="blue", expand=False))

    for outcome in summary.deletion_failures:
        console.print(f"  [red]✗[/red] {escape(str(outcome.path))}: {escape(failure_label(outcome))}")


def show_delete_all_warning(target: str) -> None:
    console.print(
        Panel(
            f"WARNING: You are about to delete ALL {target} directories!",
            border_style="yellow",
            style="yellow",
        )
    )


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)
