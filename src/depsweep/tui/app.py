"""Main TUI application for depsweep."""

from textual.app import App
from textual.binding import Binding

from depsweep.models import ScanConfig, Summary
from depsweep.reclaimer import Reclaimer
from depsweep.scanner import Scanner
from depsweep.session import SelectionSession, SessionState
from depsweep.tui.screens import MainScreen


class DepsweepApp(App[Summary]):
    """Interactive browser for found directories."""

    TITLE = "depsweep"

    CSS = """
    #stats-bar {
        height: 3;
        padding: 1 1 0 1;
    }
    #match-table {
        height: 1fr;
    }
    #status-line {
        height: 1;
        padding: 0 1;
    }
    ConfirmScreen {
        align: center middle;
    }
    #confirm-dialog {
        width: 64;
        height: auto;
        border: thick $error;
        background: $surface;
        padding: 1 2;
    }
    #confirm-buttons {
        height: auto;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("?", "help", "Help"),
    ]

    def __init__(self, config: ScanConfig):
        super().__init__()
        self.config = config
        self.sub_title = f"{config.target_name} under {config.root}"
        self.session = SelectionSession(sort_key=config.sort_key)
        self.scanner = Scanner(config)
        self.reclaimer = Reclaimer(config.workers)

    def on_mount(self) -> None:
        """Called when the app is mounted."""
        self.push_screen(MainScreen())

    async def action_quit(self) -> None:
        """Quit, unless deletions are still running."""
        if self.session.state == SessionState.DELETING:
            self.notify("Deletion in progress, wait for it to finish", severity="warning", timeout=3)
            return
        self.scanner.cancel()
        self.session.abort()
        self.exit(self.session.summary())

    def action_help(self) -> None:
        """Show help information."""
        self.notify(
            "Arrows/j/k to move, Space to select, A select all, U deselect all, "
            "S to change sort, D to delete selected, Q to quit",
            title="Help",
            timeout=5,
        )


def run_tui(config: ScanConfig) -> Summary | None:
    """Run the interactive TUI.

    Args:
        config: Validated scan configuration

    Returns:
        Session summary, or None if the app exited abnormally
    """
    app = DepsweepApp(config)
    return app.run()
