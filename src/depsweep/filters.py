"""Directory filtering rules applied during traversal."""

import os
from pathlib import PurePath

from depsweep.models import ScanConfig

HIDDEN_PREFIX = "."


def _split_fragment(fragment: str) -> tuple[str, ...]:
    return tuple(part for part in fragment.replace("\\", "/").split("/") if part)


class PathFilter:
    """Decides which directories the scanner enters and which it reports.

    Exclusion always wins over matching: a directory that is named like the
    target but is also excluded is neither entered nor reported.
    """

    def __init__(self, config: ScanConfig) -> None:
        self.target_name = config.target_name
        self.exclude_hidden = config.exclude_hidden

        # Plain names compare against the basename, fragments with a
        # separator against the trailing path components.
        self._names: set[str] = set()
        self._fragments: list[tuple[str, ...]] = []
        for entry in config.exclude:
            parts = _split_fragment(entry)
            if len(parts) == 1:
                self._names.add(parts[0])
            elif parts:
                self._fragments.append(parts)

    def should_enter(self, path: PurePath) -> bool:
        """Return False when the directory must be skipped entirely."""
        name = path.name
        if name in self._names:
            return False
        if self.exclude_hidden and name.startswith(HIDDEN_PREFIX):
            return False
        if self._fragments:
            parts = path.parts
            for fragment in self._fragments:
                if parts[-len(fragment):] == fragment:
                    return False
        return True

    def is_target(self, path: PurePath) -> bool:
        """Return True when the basename equals the target name exactly."""
        return path.name == self.target_name


def is_dangerous(path: PurePath | str) -> bool:
    """
    Check whether a match sits somewhere deleting it may be unexpected.

    Covers hidden directories, macOS application bundles and Windows
    application data.

    Args:
        path: Path of the match

    Returns:
        True if any component is hidden, a .app bundle or AppData
    """
    text = os.fspath(path)
    parts = [part for part in text.replace("\\", "/").split("/") if part]

    for part in parts:
        if part.startswith(HIDDEN_PREFIX) and part not in (".", ".."):
            return True
        if part.endswith(".app") or part == "AppData":
            return True

    return False

