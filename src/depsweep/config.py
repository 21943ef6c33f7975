"""Build the scan configuration from raw command-line values."""

import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from depsweep.errors import ConfigError
from depsweep.models import DEFAULT_TARGET, DEFAULT_WORKERS, ScanConfig, SizeUnit, SortKey


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def parse_exclude(value: Optional[str]) -> frozenset[str]:
    """
    Split a comma separated exclude list.

    Args:
        value: String such as "ignore1, ignore2", or None

    Returns:
        Set of stripped, non-empty entries
    """
    if not value:
        return frozenset()
    return frozenset(part.strip() for part in value.split(",") if part.strip())


def resolve_root(directory: str = ".", full: bool = False) -> Path:
    """Pick the scan root: the home directory with full, else directory."""
    root = Path.home() if full else expand_path(directory)
    return root.resolve()


def build_scan_config(
    directory: str = ".",
    full: bool = False,
    target: str = DEFAULT_TARGET,
    exclude: Optional[str] = None,
    exclude_hidden: bool = False,
    sort: SortKey = SortKey.SIZE,
    in_gb: bool = False,
    workers: int = DEFAULT_WORKERS,
) -> ScanConfig:
    """
    Validate raw options once and freeze them into a ScanConfig.

    Raises:
        ConfigError: If a value is invalid
    """
    try:
        return ScanConfig(
            root=resolve_root(directory, full),
            target_name=target,
            exclude=parse_exclude(exclude),
            exclude_hidden=exclude_hidden,
            sort_key=sort,
            unit=SizeUnit.GB if in_gb else SizeUnit.MB,
            workers=workers,
        )
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise ConfigError(messages) from e
