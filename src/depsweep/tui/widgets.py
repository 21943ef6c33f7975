"""Custom widgets for the depsweep TUI."""

from rich.markup import escape
from textual.reactive import reactive
from textual.widgets import DataTable, Static

from depsweep.display import format_age, format_size
from depsweep.models import Match, MatchStatus, SizeUnit
from depsweep.session import SessionSnapshot, SessionState


def status_cell(match: Match) -> str:
    """Marker shown in the first column of a row."""
    if match.status == MatchStatus.SELECTED:
        return "[green]X[/green]"
    if match.status == MatchStatus.DELETING:
        return "[cyan]…[/cyan]"
    if match.status == MatchStatus.DELETED:
        return "[red]deleted[/red]"
    if match.status == MatchStatus.FAILED:
        reason = match.failure_reason.value if match.failure_reason else "failed"
        return f"[bold red]{reason}[/bold red]"
    return "[ ]"


class StatsBar(Static):
    """Header line with totals, scan time and freed space."""

    scanning: reactive[bool] = reactive(True)

    def __init__(self, unit: SizeUnit, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.unit = unit
        self.snapshot: SessionSnapshot | None = None
        self.scan_time: float = 0.0

    def update_stats(self, snapshot: SessionSnapshot, scan_time: float) -> None:
        self.snapshot = snapshot
        self.scan_time = scan_time
        self.scanning = snapshot.state == SessionState.SCANNING
        self.refresh()

    def render(self) -> str:
        if not self.snapshot:
            return "[dim]Scanning directories...[/dim]"

        snap = self.snapshot
        scan_label = "[cyan]scanning…[/cyan]" if self.scanning else f"{self.scan_time:.2f}s"
        return (
            f"[bold]Total Size:[/bold] {format_size(snap.total_bytes, SizeUnit.GB)}   "
            f"[bold]Directories:[/bold] {len(snap.matches)}   "
            f"[bold]Scan Time:[/bold] {scan_label}   "
            f"[bold]Selected:[/bold] {snap.selected_count} ({format_size(snap.selected_bytes, self.unit)})   "
            f"[bold]Total Deleted:[/bold] [green]{format_size(snap.freed_bytes, SizeUnit.GB)}[/green]   "
            f"[dim]sort: {snap.sort_key.value}[/dim]"
        )


class MatchTable(DataTable, can_focus=False):
    """Result list; the cursor is driven by the session, not by the widget."""

    def __init__(self, unit: SizeUnit, *args, **kwargs):
        super().__init__(*args, cursor_type="row", zebra_stripes=True, **kwargs)
        self.unit = unit

    def on_mount(self) -> None:
        self.add_columns("", "Path", "Age", "Size")

    def show(self, snapshot: SessionSnapshot) -> None:
        """Redraw all rows from a snapshot and place the cursor."""
        self.clear()
        for match in snapshot.matches:
            path = escape(str(match.path))
            if match.is_dangerous and not match.is_settled:
                path = f"[yellow]{path}[/yellow]"
            elif match.is_settled:
                path = f"[dim]{path}[/dim]"
            self.add_row(
                status_cell(match),
                path,
                format_age(match.age_seconds()),
                format_size(match.size_bytes, self.unit),
                key=str(match.path),
            )
        if snapshot.matches:
            self.move_cursor(row=snapshot.cursor_index)
