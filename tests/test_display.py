"""Tests for Rich output helpers."""

from datetime import datetime
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from rich.console import Console

from depsweep.display import (
    failure_label,
    format_age,
    format_size,
    show_matches,
    show_summary,
)
from depsweep.models import DeletionOutcome, FailureReason, Match, SizeUnit, Summary


def capture() -> Console:
    return Console(file=StringIO(), width=200, color_system=None)


class TestFormatSize:
    def test_megabytes(self):
        assert format_size(5 * 1024**2) == "5.00MB"

    def test_gigabytes(self):
        assert format_size(3 * 1024**3, SizeUnit.GB) == "3.00GB"

    def test_zero(self):
        assert format_size(0) == "0.00MB"


class TestFormatAge:
    def test_seconds(self):
        assert format_age(42) == "42s"

    def test_minutes(self):
        assert format_age(125) == "2m"

    def test_hours(self):
        assert format_age(3 * 3600 + 5) == "3h"

    def test_days(self):
        assert format_age(40 * 86400) == "40d"


class TestFailureLabel:
    def test_with_detail(self):
        outcome = DeletionOutcome(
            path=Path("/a"), success=False, reason=FailureReason.NOT_FOUND, detail="gone"
        )
        assert failure_label(outcome) == "not-found: gone"

    def test_without_detail(self):
        outcome = DeletionOutcome(path=Path("/a"), success=False, reason=FailureReason.IO_ERROR)
        assert failure_label(outcome) == "io-error"


class TestShowMatches:
    def test_lists_matches(self):
        console = capture()
        matches = [
            Match(path=Path("/w/a/node_modules"), size_bytes=2 * 1024**2, last_modified=datetime.now()),
        ]
        with patch("depsweep.display.console", console):
            show_matches(matches)

        output = console.file.getvalue()
        assert "/w/a/node_modules" in output
        assert "2.00MB" in output
        assert "1 directories" in output

    def test_no_matches(self):
        console = capture()
        with patch("depsweep.display.console", console):
            show_matches([])
        assert "No directories found" in console.file.getvalue()


class TestShowSummary:
    def test_lists_failures(self):
        console = capture()
        summary = Summary(
            total_matches=2,
            total_selected=2,
            total_freed_bytes=1024**2,
            soft_scan_failures=4,
            outcomes=[
                DeletionOutcome(path=Path("/w/a/node_modules"), success=True, freed_bytes=1024**2),
                DeletionOutcome(
                    path=Path("/w/b/node_modules"),
                    success=False,
                    reason=FailureReason.PERMISSION_DENIED,
                    detail="Permission denied",
                ),
            ],
        )
        with patch("depsweep.display.console", console):
            show_summary(summary)

        output = console.file.getvalue()
        assert "Directories found" in output
        assert "1.00MB" in output
        assert "Unreadable during scan" in output
        assert "Failed deletions" in output
        assert "/w/b/node_modules: permission-denied: Permission denied" in output
