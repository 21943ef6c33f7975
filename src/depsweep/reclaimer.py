"""Deletion of matched directories."""

import errno
import logging
import os
import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable

from depsweep.errors import DeletionError
from depsweep.models import DEFAULT_WORKERS, DeletionOutcome, FailureReason, Match, MatchStatus

log = logging.getLogger(__name__)

OutcomeCallback = Callable[[DeletionOutcome], None]


def classify_os_error(e: OSError) -> FailureReason:
    """Map an OSError onto a failure reason."""
    if isinstance(e, FileNotFoundError):
        return FailureReason.NOT_FOUND
    if isinstance(e, PermissionError):
        return FailureReason.PERMISSION_DENIED
    if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
        return FailureReason.NOT_EMPTY
    return FailureReason.IO_ERROR


def remove_tree(match: Match) -> None:
    """
    Remove the directory of a match.

    Raises:
        DeletionError: If the directory is missing or cannot be fully removed
    """
    path = match.path
    if not os.path.lexists(path):
        raise DeletionError(path, FailureReason.NOT_FOUND, "directory no longer exists")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise DeletionError(path, classify_os_error(e), f"{e.strerror or e}") from e

    # A concurrent writer can recreate entries while rmtree runs
    if os.path.lexists(path):
        raise DeletionError(path, FailureReason.NOT_EMPTY, "directory not empty after removal")


class Reclaimer:
    """Deletes selected matches and reports one outcome per match."""

    def __init__(self, workers: int = DEFAULT_WORKERS) -> None:
        self.workers = max(1, workers)

    def delete(self, match: Match) -> DeletionOutcome:
        """
        Delete one match, never raising for filesystem problems.

        Args:
            match: Match to delete

        Returns:
            DeletionOutcome; freed_bytes is the size recorded at scan time
        """
        match.status = MatchStatus.DELETING
        try:
            remove_tree(match)
        except DeletionError as e:
            match.status = MatchStatus.FAILED
            match.failure_reason = e.reason
            match.failure_detail = e.detail
            log.warning("Could not delete %s (%s): %s", e.path, e.reason.value, e.detail)
            return DeletionOutcome(
                path=match.path,
                success=False,
                freed_bytes=0,
                reason=e.reason,
                detail=e.detail,
            )

        match.status = MatchStatus.DELETED
        log.debug("Deleted %s (%d bytes)", match.path, match.size_bytes)
        return DeletionOutcome(path=match.path, success=True, freed_bytes=match.size_bytes)

    def delete_many(
        self,
        matches: Iterable[Match],
        on_outcome: OutcomeCallback | None = None,
    ) -> list[DeletionOutcome]:
        """
        Delete matches concurrently on a bounded pool.

        Args:
            matches: Matches to delete
            on_outcome: Optional callback(outcome), called as each deletion finishes

        Returns:
            Outcomes in completion order
        """
        matches = list(matches)
        if not matches:
            return []

        outcomes: list[DeletionOutcome] = []
        workers = min(self.workers, len(matches))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="depsweep-delete") as executor:
            futures = [executor.submit(self.delete, match) for match in matches]
            for future in as_completed(futures):
                outcome = future.result()
                outcomes.append(outcome)
                if on_outcome:
                    on_outcome(outcome)

        freed = sum(o.freed_bytes for o in outcomes)
        failed = sum(1 for o in outcomes if not o.success)
        log.info("Deleted %d of %d directories, %d bytes freed", len(outcomes) - failed, len(outcomes), freed)
        return outcomes
