"""Data models for depsweep."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TARGET = "node_modules"
DEFAULT_WORKERS = 8


class SortKey(str, Enum):
    """Ordering applied to the result set."""

    SIZE = "size"  # Largest first
    PATH = "path"  # Lexicographic
    LAST_MOD = "last-mod"  # Oldest first


class SizeUnit(str, Enum):
    """Unit used when displaying sizes."""

    MB = "mb"
    GB = "gb"


class MatchStatus(str, Enum):
    """Lifecycle of a match inside a session."""

    PENDING = "pending"
    SELECTED = "selected"
    DELETING = "deleting"
    DELETED = "deleted"
    FAILED = "failed"


class FailureReason(str, Enum):
    """Why a deletion did not complete."""

    NOT_FOUND = "not-found"
    PERMISSION_DENIED = "permission-denied"
    NOT_EMPTY = "not-empty"
    IO_ERROR = "io-error"


class ScanConfig(BaseModel):
    """Validated, read-only configuration for one run."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(..., description="Absolute directory the scan starts from")
    target_name: str = Field(DEFAULT_TARGET, description="Directory basename to match")
    exclude: frozenset[str] = Field(
        default_factory=frozenset,
        description="Names or path fragments that are never entered",
    )
    exclude_hidden: bool = Field(False, description="Skip directories starting with '.'")
    sort_key: SortKey = Field(SortKey.SIZE, description="Initial ordering of results")
    unit: SizeUnit = Field(SizeUnit.MB, description="Display unit for sizes")
    workers: int = Field(DEFAULT_WORKERS, ge=1, description="Worker pool size")

    @field_validator("target_name")
    @classmethod
    def _check_target_name(cls, value: str) -> str:
        value = value.strip()
        if not value or value in (".", ".."):
            raise ValueError("target name must be a directory name")
        if "/" in value or "\\" in value:
            raise ValueError("target name must not contain a path separator")
        return value

    @field_validator("exclude")
    @classmethod
    def _normalize_exclude(cls, value: frozenset[str]) -> frozenset[str]:
        return frozenset(item.strip().strip("/\\") for item in value if item.strip().strip("/\\"))


class Match(BaseModel):
    """A directory whose name equals the target, with its measured footprint."""

    model_config = ConfigDict(validate_assignment=True)

    path: Path = Field(..., frozen=True, description="Absolute path of the matched directory")
    size_bytes: int = Field(..., ge=0, frozen=True, description="Total size of files below path")
    last_modified: datetime = Field(..., frozen=True, description="mtime of the directory itself")
    file_count: int = Field(0, ge=0, frozen=True, description="Number of files counted")
    is_dangerous: bool = Field(
        False,
        frozen=True,
        description="Inside a hidden, application bundle or app-data directory",
    )
    status: MatchStatus = Field(MatchStatus.PENDING, description="Selection/deletion status")
    failure_reason: Optional[FailureReason] = Field(None, description="Set when status is failed")
    failure_detail: Optional[str] = Field(None, description="Error message for a failed deletion")

    @property
    def is_selected(self) -> bool:
        return self.status == MatchStatus.SELECTED

    @property
    def is_settled(self) -> bool:
        """True once the match was deleted or its deletion failed."""
        return self.status in (MatchStatus.DELETED, MatchStatus.FAILED)

    def age_seconds(self, now: Optional[datetime] = None) -> int:
        """Seconds elapsed since the directory was last modified."""
        now = now or datetime.now()
        return max(0, int((now - self.last_modified).total_seconds()))

    def size_in(self, unit: SizeUnit) -> float:
        """Size in binary megabytes or gigabytes."""
        shift = 30 if unit == SizeUnit.GB else 20
        return self.size_bytes / (1 << shift)


class DeletionOutcome(BaseModel):
    """Result of deleting one match."""

    path: Path = Field(..., description="Directory that was targeted")
    success: bool = Field(..., description="Whether the directory is gone")
    freed_bytes: int = Field(0, ge=0, description="Scan-time size of a deleted directory")
    reason: Optional[FailureReason] = Field(None, description="Failure category")
    detail: Optional[str] = Field(None, description="Error message if failed")


class ScanStats(BaseModel):
    """Counters collected while scanning."""

    directories_visited: int = Field(0, description="Directories listed during traversal")
    soft_failures: int = Field(0, description="Entries that could not be read")
    failed_paths: list[str] = Field(default_factory=list, description="Sample of unreadable paths")
    elapsed_seconds: float = Field(0.0, description="Wall time of the scan")
    cancelled: bool = Field(False, description="Whether the scan was stopped early")


class Summary(BaseModel):
    """Final report of a session."""

    total_matches: int = Field(0, description="Matches found")
    total_selected: int = Field(0, description="Matches submitted for deletion")
    total_freed_bytes: int = Field(0, description="Bytes reclaimed by successful deletions")
    soft_scan_failures: int = Field(0, description="Unreadable entries skipped while scanning")
    outcomes: list[DeletionOutcome] = Field(default_factory=list)
    aborted: bool = Field(False, description="Whether the user quit before deleting")

    @property
    def deletion_failures(self) -> list[DeletionOutcome]:
        """Outcomes of deletions that failed."""
        return [o for o in self.outcomes if not o.success]

    @property
    def deletion_failure_count(self) -> int:
        return len(self.deletion_failures)

    @property
    def deleted_count(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def all_deletions_failed(self) -> bool:
        """True when deletions were requested and none of them succeeded."""
        return bool(self.outcomes) and self.deleted_count == 0
