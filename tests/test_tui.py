"""Tests for TUI screen actions that do not need a running app."""

from types import SimpleNamespace
from unittest.mock import MagicMock

from depsweep.models import ScanStats, SortKey
from depsweep.session import SelectionSession, SessionState
from depsweep.tui.screens import MainScreen


def make_screen(session: SelectionSession) -> SimpleNamespace:
    """Stand-in for MainScreen carrying just what the actions touch."""
    screen = SimpleNamespace(app=SimpleNamespace(session=session), notify=MagicMock(), _dirty=False)
    screen._act = lambda action: MainScreen._act(screen, action)
    return screen


class TestCycleSort:
    def test_announces_new_order(self):
        session = SelectionSession(sort_key=SortKey.SIZE)
        session.finish_scan(ScanStats())
        screen = make_screen(session)

        MainScreen.action_cycle_sort(screen)

        assert session.results.sort_key == SortKey.PATH
        screen.notify.assert_called_once_with("Sorted by path", timeout=2)
        assert screen._dirty

    def test_refused_change_is_not_announced(self):
        """Only the warning is shown when the order cannot change."""
        session = SelectionSession(sort_key=SortKey.SIZE)
        session.abort()
        assert session.state == SessionState.SUMMARY
        screen = make_screen(session)

        MainScreen.action_cycle_sort(screen)

        assert session.results.sort_key == SortKey.SIZE
        screen.notify.assert_called_once()
        assert screen.notify.call_args.kwargs["severity"] == "warning"
        assert not screen._dirty
