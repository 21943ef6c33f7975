"""Exception hierarchy for depsweep."""

from pathlib import Path

from depsweep.models import FailureReason


class DepsweepError(Exception):
    """Base class for all depsweep errors."""


class ConfigError(DepsweepError):
    """Raw configuration could not be turned into a ScanConfig."""


class RootInvalid(DepsweepError):
    """The scan root does not exist, is not a directory or cannot be listed."""

    def __init__(self, root: Path, message: str) -> None:
        super().__init__(f"{root}: {message}")
        self.root = root


class TraversalError(DepsweepError):
    """A directory below the root could not be read."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"{path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class DeletionError(DepsweepError):
    """Removing a matched directory failed."""

    def __init__(self, path: Path, reason: FailureReason, detail: str) -> None:
        super().__init__(f"{path}: {detail}")
        self.path = path
        self.reason = reason
        self.detail = detail


class SessionError(DepsweepError):
    """An action is not valid for the current session state."""


class InvalidTransition(SessionError):
    """The requested action is not allowed in the current state."""


class NothingSelected(SessionError):
    """Deletion was requested with an empty selection."""


class DeletionInProgress(SessionError):
    """The session cannot end while deletions are still running."""
