"""Textual interface for depsweep."""

from depsweep.tui.app import DepsweepApp, run_tui

__all__ = ["DepsweepApp", "run_tui"]
