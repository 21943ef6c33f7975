"""Shared test fixtures."""

from pathlib import Path

import pytest

from depsweep.models import ScanConfig


def write_files(directory: Path, sizes: list[int]) -> int:
    """Create one file per size inside directory and return the total."""
    directory.mkdir(parents=True, exist_ok=True)
    for i, size in enumerate(sizes):
        (directory / f"file{i}.bin").write_bytes(b"x" * size)
    return sum(sizes)


@pytest.fixture
def make_config(tmp_path):
    """Build a ScanConfig rooted at tmp_path unless told otherwise."""

    def _make(**overrides) -> ScanConfig:
        values = {"root": tmp_path, "workers": 2}
        values.update(overrides)
        return ScanConfig(**values)

    return _make


@pytest.fixture
def sample_tree(tmp_path):
    """
    Layout used by the end-to-end scenarios:

        a/node_modules         10 files, 1000 bytes
        b/.hidden/node_modules 500 bytes
    """
    write_files(tmp_path / "a" / "node_modules", [100] * 10)
    write_files(tmp_path / "b" / ".hidden" / "node_modules", [500])
    return tmp_path
