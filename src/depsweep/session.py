"""Interactive selection state machine."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from depsweep.errors import DeletionInProgress, InvalidTransition, NothingSelected, SessionError
from depsweep.models import (
    DeletionOutcome,
    Match,
    MatchStatus,
    ScanStats,
    SortKey,
    Summary,
)
from depsweep.results import ResultSet

log = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Phases of a session, in the order they are normally reached."""

    SCANNING = "scanning"
    BROWSING = "browsing"
    CONFIRMING = "confirming"
    DELETING = "deleting"
    SUMMARY = "summary"


@dataclass(frozen=True)
class SessionSnapshot:
    """Copy of the session handed to renderers."""

    state: SessionState
    cursor_index: int
    sort_key: SortKey
    matches: tuple[Match, ...]
    selected_count: int
    selected_bytes: int
    freed_bytes: int
    total_bytes: int


class SelectionSession:
    """
    Owns the result set for one run and drives it from user input.

    All methods must be called from a single thread. Scan workers and the
    reclaimer hand their results over through ``add_match`` and
    ``record_outcome``.
    """

    def __init__(self, results: Optional[ResultSet] = None, sort_key: SortKey = SortKey.SIZE):
        self.results = results if results is not None else ResultSet(sort_key)
        self.state = SessionState.SCANNING
        self.cursor_index = 0
        self.scan_stats: Optional[ScanStats] = None
        self._in_flight: set[Path] = set()
        self._outcomes: list[DeletionOutcome] = []
        self._requested = 0
        self._aborted = False

    # -- queries ---------------------------------------------------------

    @property
    def scanning_done(self) -> bool:
        return self.state != SessionState.SCANNING

    @property
    def current(self) -> Optional[Match]:
        """Match under the cursor."""
        if not self.results:
            return None
        return self.results.get(self.cursor_index)

    @property
    def selected(self) -> set[int]:
        """Indices of selected matches in the current order."""
        return {i for i, m in enumerate(self.results) if m.status == MatchStatus.SELECTED}

    @property
    def selected_matches(self) -> list[Match]:
        return [m for m in self.results if m.status == MatchStatus.SELECTED]

    @property
    def outcomes(self) -> list[DeletionOutcome]:
        return list(self._outcomes)

    @property
    def freed_bytes(self) -> int:
        return sum(o.freed_bytes for o in self._outcomes if o.success)

    def snapshot(self) -> SessionSnapshot:
        selected = self.selected_matches
        return SessionSnapshot(
            state=self.state,
            cursor_index=self.cursor_index,
            sort_key=self.results.sort_key,
            matches=tuple(m.model_copy() for m in self.results),
            selected_count=len(selected),
            selected_bytes=sum(m.size_bytes for m in selected),
            freed_bytes=self.freed_bytes,
            total_bytes=self.results.total_bytes,
        )

    # -- scanning --------------------------------------------------------

    def add_match(self, match: Match) -> bool:
        """Add a freshly scanned match, keeping the cursor on the same row."""
        self._require("add matches", SessionState.SCANNING)
        anchor = self.current
        added = self.results.insert(match)
        if added and anchor is not None:
            self.cursor_index = self.results.index_of(anchor.path) or 0
        return added

    def finish_scan(self, stats: Optional[ScanStats] = None) -> None:
        self._require("finish the scan", SessionState.SCANNING)
        self.scan_stats = stats
        self.state = SessionState.BROWSING
        log.debug("Scan complete with %d matches", len(self.results))

    # -- browsing --------------------------------------------------------

    def move_cursor(self, delta: int) -> int:
        """Move by delta rows, clamped to the result bounds without wrapping."""
        self._require("move the cursor", SessionState.SCANNING, SessionState.BROWSING)
        self.cursor_index = self._clamp(self.cursor_index + delta)
        return self.cursor_index

    def move_up(self) -> int:
        return self.move_cursor(-1)

    def move_down(self) -> int:
        return self.move_cursor(1)

    def move_to(self, index: int) -> int:
        self._require("move the cursor", SessionState.SCANNING, SessionState.BROWSING)
        self.cursor_index = self._clamp(index)
        return self.cursor_index

    def toggle(self) -> Optional[Match]:
        """Flip the match under the cursor between pending and selected."""
        self._require("change the selection", SessionState.SCANNING, SessionState.BROWSING)
        match = self.current
        if match is None:
            return None
        if match.status == MatchStatus.PENDING:
            match.status = MatchStatus.SELECTED
        elif match.status == MatchStatus.SELECTED:
            match.status = MatchStatus.PENDING
        return match

    def select_all(self) -> int:
        """Select every pending match. Returns the number newly selected."""
        self._require("change the selection", SessionState.SCANNING, SessionState.BROWSING)
        count = 0
        for match in self.results:
            if match.status == MatchStatus.PENDING:
                match.status = MatchStatus.SELECTED
                count += 1
        return count

    def clear_selection(self) -> None:
        self._require("change the selection", SessionState.SCANNING, SessionState.BROWSING)
        for match in self.results:
            if match.status == MatchStatus.SELECTED:
                match.status = MatchStatus.PENDING

    def change_sort(self, sort_key: SortKey) -> None:
        """Reorder the results; the cursor follows the row it was on."""
        self._require("change the order", SessionState.SCANNING, SessionState.BROWSING)
        anchor = self.current
        index = self.results.reorder(sort_key, anchor.path if anchor else None)
        self.cursor_index = index if index is not None else self._clamp(self.cursor_index)

    # -- deletion --------------------------------------------------------

    def request_deletion(self) -> list[Match]:
        """Ask for confirmation of the current selection."""
        self._require("request deletion", SessionState.BROWSING)
        selected = self.selected_matches
        if not selected:
            raise NothingSelected("select at least one directory first")
        self.state = SessionState.CONFIRMING
        return selected

    def cancel_deletion(self) -> None:
        """Return to browsing with the selection untouched."""
        self._require("cancel deletion", SessionState.CONFIRMING)
        self.state = SessionState.BROWSING

    def confirm_deletion(self) -> list[Match]:
        """Mark the selection as deleting and hand it to the reclaimer."""
        self._require("confirm deletion", SessionState.CONFIRMING)
        targets = self.selected_matches
        for match in targets:
            match.status = MatchStatus.DELETING
        self._in_flight = {m.path for m in targets}
        self._requested = len(targets)
        self.state = SessionState.DELETING
        log.info("Deleting %d directories", len(targets))
        return targets

    def record_outcome(self, outcome: DeletionOutcome) -> None:
        """Store one deletion result; the last one ends the session."""
        self._require("record outcomes", SessionState.DELETING)
        if outcome.path not in self._in_flight:
            raise SessionError(f"no deletion in progress for {outcome.path}")

        self._in_flight.discard(outcome.path)
        self._outcomes.append(outcome)

        index = self.results.index_of(outcome.path)
        if index is not None:
            match = self.results.get(index)
            if match.status == MatchStatus.DELETING:
                match.status = MatchStatus.DELETED if outcome.success else MatchStatus.FAILED
                if not outcome.success:
                    match.failure_reason = outcome.reason
                    match.failure_detail = outcome.detail

        if not self._in_flight:
            self.state = SessionState.SUMMARY

    def abort(self) -> None:
        """End the session early. Not possible while deletions are running."""
        if self.state == SessionState.DELETING:
            raise DeletionInProgress(f"{len(self._in_flight)} deletions still running")
        if self.state == SessionState.SUMMARY:
            return
        self._aborted = True
        self.state = SessionState.SUMMARY

    def summary(self) -> Summary:
        stats = self.scan_stats
        return Summary(
            total_matches=len(self.results),
            total_selected=self._requested if self._outcomes else len(self.selected_matches),
            total_freed_bytes=self.freed_bytes,
            soft_scan_failures=stats.soft_failures if stats else 0,
            outcomes=list(self._outcomes),
            aborted=self._aborted,
        )

    # -- helpers ---------------------------------------------------------

    def _clamp(self, index: int) -> int:
        if not self.results:
            return 0
        return min(max(index, 0), len(self.results) - 1)

    def _require(self, action: str, *states: SessionState) -> None:
        if self.state not in states:
            raise InvalidTransition(f"cannot {action} while {self.state.value}")
