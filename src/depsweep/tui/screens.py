"""TUI screens for depsweep."""

import time
from typing import Callable

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, Footer, Header, Static

from depsweep.display import format_size
from depsweep.errors import NothingSelected, RootInvalid, SessionError
from depsweep.models import DeletionOutcome, Match, SizeUnit, SortKey
from depsweep.session import SessionState
from depsweep.tui.widgets import MatchTable, StatsBar

SORT_CYCLE = list(SortKey)


class MainScreen(Screen):
    """Result browser: navigate, select and delete."""

    BINDINGS = [
        Binding("up,k", "cursor_up", "Up", show=False),
        Binding("down,j", "cursor_down", "Down", show=False),
        Binding("pageup", "page_up", "Page Up", show=False),
        Binding("pagedown", "page_down", "Page Down", show=False),
        Binding("space", "toggle_select", "Select"),
        Binding("a", "select_all", "Select All"),
        Binding("u", "deselect_all", "Deselect All"),
        Binding("s", "cycle_sort", "Sort"),
        Binding("d,delete", "delete_selected", "Delete Selected"),
    ]

    PAGE = 10

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._dirty = True
        self._scan_started = time.monotonic()
        self._scan_time = 0.0

    def compose(self) -> ComposeResult:
        unit = self.app.config.unit
        yield Header()
        with Container(id="main-container"):
            yield StatsBar(unit, id="stats-bar")
            yield MatchTable(unit, id="match-table")
            yield Static("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        self.set_interval(0.1, self._flush)
        self._set_status("[cyan]Scanning directories...[/cyan]")
        self.run_worker(self._scan, thread=True, group="scan")

    # -- background work ---------------------------------------------------

    def _scan(self) -> None:
        """Feed matches from the scanner thread to the UI thread."""
        app = self.app
        try:
            for match in app.scanner.scan():
                if app.scanner.cancelled:
                    break
                app.call_from_thread(self._on_match, match)
        except RootInvalid as e:
            if not app.scanner.cancelled:
                app.call_from_thread(self._on_scan_done)
                app.call_from_thread(self._set_status, f"[red]{escape(str(e))}[/red]")
            return
        if not app.scanner.cancelled:
            app.call_from_thread(self._on_scan_done)

    def _delete(self, targets: list[Match]) -> None:
        app = self.app

        def report(outcome: DeletionOutcome) -> None:
            app.call_from_thread(self._on_outcome, outcome)

        app.reclaimer.delete_many(targets, on_outcome=report)

    # -- handoff from workers ----------------------------------------------

    def _on_match(self, match: Match) -> None:
        session = self.app.session
        if session.state == SessionState.SCANNING:
            session.add_match(match)
            self._dirty = True

    def _on_scan_done(self) -> None:
        session = self.app.session
        if session.state != SessionState.SCANNING:
            return
        session.finish_scan(self.app.scanner.stats)
        self._scan_time = time.monotonic() - self._scan_started
        self._dirty = True

        stats = self.app.scanner.stats
        if not session.results:
            self._set_status("[yellow]No directories found[/yellow]")
        elif stats.soft_failures:
            self._set_status(f"[dim]Scan complete, {stats.soft_failures} unreadable entries skipped[/dim]")
        else:
            self._set_status("[dim]Scan complete[/dim]")

    def _on_outcome(self, outcome: DeletionOutcome) -> None:
        session = self.app.session
        session.record_outcome(outcome)
        self._dirty = True
        if not outcome.success:
            self.notify(f"{outcome.path}: {outcome.reason.value}", severity="error", timeout=5)
        if session.state == SessionState.SUMMARY:
            summary = session.summary()
            unit = self.app.config.unit
            self._set_status(
                f"[bold green]Deletion finished:[/bold green] {summary.deleted_count} deleted, "
                f"{summary.deletion_failure_count} failed, "
                f"{format_size(summary.total_freed_bytes, unit)} freed. Press q to exit."
            )

    # -- rendering ---------------------------------------------------------

    def _flush(self) -> None:
        if not self._dirty:
            return
        self._dirty = False
        snapshot = self.app.session.snapshot()
        scan_time = self._scan_time or (time.monotonic() - self._scan_started)
        self.query_one("#stats-bar", StatsBar).update_stats(snapshot, scan_time)
        self.query_one("#match-table", MatchTable).show(snapshot)

    def _set_status(self, text: str) -> None:
        self.query_one("#status-line", Static).update(text)

    def _act(self, action: Callable[[], object]) -> bool:
        try:
            action()
        except SessionError as e:
            self.notify(str(e), severity="warning", timeout=3)
            return False
        self._dirty = True
        return True

    # -- actions -----------------------------------------------------------

    def action_cursor_up(self) -> None:
        self._act(self.app.session.move_up)

    def action_cursor_down(self) -> None:
        self._act(self.app.session.move_down)

    def action_page_up(self) -> None:
        self._act(lambda: self.app.session.move_cursor(-self.PAGE))

    def action_page_down(self) -> None:
        self._act(lambda: self.app.session.move_cursor(self.PAGE))

    def action_toggle_select(self) -> None:
        self._act(self.app.session.toggle)

    def action_select_all(self) -> None:
        self._act(self.app.session.select_all)

    def action_deselect_all(self) -> None:
        self._act(self.app.session.clear_selection)

    def action_cycle_sort(self) -> None:
        session = self.app.session
        following = SORT_CYCLE[(SORT_CYCLE.index(session.results.sort_key) + 1) % len(SORT_CYCLE)]
        if self._act(lambda: session.change_sort(following)):
            self.notify(f"Sorted by {session.results.sort_key.value}", timeout=2)

    def action_delete_selected(self) -> None:
        session = self.app.session
        if session.state == SessionState.SCANNING:
            self.notify("Wait for the scan to finish", severity="warning", timeout=3)
            return
        try:
            selected = session.request_deletion()
        except NothingSelected:
            self.notify("No directories selected", severity="warning")
            return
        except SessionError as e:
            self.notify(str(e), severity="warning")
            return
        self.app.push_screen(ConfirmScreen(selected, self.app.config.unit), self._on_confirm)

    def _on_confirm(self, confirmed: bool | None) -> None:
        session = self.app.session
        if not confirmed:
            session.cancel_deletion()
            self.notify("Deletion cancelled", timeout=2)
            return
        targets = session.confirm_deletion()
        self._dirty = True
        self._set_status(f"[cyan]Deleting {len(targets)} directories...[/cyan]")
        self.run_worker(lambda: self._delete(targets), thread=True, group="delete")


class ConfirmScreen(ModalScreen[bool]):
    """Deletion confirmation."""

    BINDINGS = [
        Binding("y", "confirm", "Yes, Delete"),
        Binding("n", "cancel", "Cancel"),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, matches: list[Match], unit: SizeUnit):
        super().__init__()
        self.matches = matches
        self.unit = unit

    def compose(self) -> ComposeResult:
        total = sum(m.size_bytes for m in self.matches)
        dangerous = sum(1 for m in self.matches if m.is_dangerous)
        lines = [
            f"[bold]Delete {len(self.matches)} directories?[/bold]",
            f"Total to free: [cyan]{format_size(total, self.unit)}[/cyan]",
        ]
        if dangerous:
            lines.append(f"[yellow]{dangerous} of them are inside hidden or application directories[/yellow]")
        lines.append("[red]This cannot be undone.[/red]")

        with Container(id="confirm-dialog"):
            yield Static("\n".join(lines), id="confirm-text")
            with Horizontal(id="confirm-buttons"):
                yield Button("Delete", variant="error", id="btn-delete")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-delete":
            self.action_confirm()
        else:
            self.action_cancel()

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
