"""Directory discovery and size measurement for depsweep.

The scanner walks the tree below the configured root with an explicit
work-list, reports every directory named like the target and never looks
inside a match for further matches. Each immediate child of the root is an
independent unit of work for the thread pool; workers hand their matches to
the consuming thread through a queue.
"""

import logging
import os
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterator, Union

from depsweep.errors import RootInvalid, TraversalError
from depsweep.filters import PathFilter, is_dangerous
from depsweep.models import Match, ScanConfig, ScanStats
from depsweep.results import ResultSet

log = logging.getLogger(__name__)

# Only a sample of unreadable paths is kept for the report
MAX_RECORDED_FAILURES = 50


def check_root(root: Path) -> Path:
    """
    Make sure the scan root is a readable directory.

    Args:
        root: Directory the scan starts from

    Returns:
        The same root

    Raises:
        RootInvalid: If the root is missing, not a directory or unreadable
    """
    if not root.exists():
        raise RootInvalid(root, "does not exist")
    if not root.is_dir():
        raise RootInvalid(root, "is not a directory")
    try:
        with os.scandir(root) as entries:
            next(entries, None)
    except OSError as e:
        raise RootInvalid(root, f"cannot be read ({e.strerror or e})") from e
    return root


def get_directory_size(path: Path) -> tuple[int, int, int, int]:
    """
    Measure a directory tree without following symbolic links.

    Regular files and symlinks to files count with their own size. Symlinks
    to directories are neither followed nor counted, which rules out cycles.
    Broken symlinks and unreadable subdirectories are skipped.

    Args:
        path: Directory to measure

    Returns:
        Tuple of (total_bytes, file_count, dir_count, soft_failures)
    """
    total_size = 0
    file_count = 0
    dir_count = 0
    failures = 0

    pending = [os.fspath(path)]
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_symlink():
                            if entry.is_dir():
                                continue
                            if entry.is_file():
                                total_size += entry.stat(follow_symlinks=False).st_size
                                file_count += 1
                            elif not os.path.exists(entry.path):
                                log.debug("Broken symlink %s", entry.path)
                                failures += 1
                        elif entry.is_dir(follow_symlinks=False):
                            dir_count += 1
                            pending.append(entry.path)
                        elif entry.is_file(follow_symlinks=False):
                            total_size += entry.stat(follow_symlinks=False).st_size
                            file_count += 1
                    except OSError as e:
                        log.debug("Cannot stat %s: %s", entry.path, e)
                        failures += 1
        except OSError as e:
            log.debug("Cannot read %s: %s", current, e)
            failures += 1

    return total_size, file_count, dir_count, failures


@dataclass
class _WalkDone:
    """Completion marker a worker posts after its subtree is finished."""

    seed: Path
    visited: int = 0
    soft_failures: int = 0
    failed_paths: list[str] = field(default_factory=list)

    def record_failure(self, path: Union[Path, str], count: int = 1) -> None:
        self.soft_failures += count
        if len(self.failed_paths) < MAX_RECORDED_FAILURES:
            self.failed_paths.append(str(path))


class Scanner:
    """Finds target directories below the configured root."""

    def __init__(self, config: ScanConfig) -> None:
        self.config = config
        self.filter = PathFilter(config)
        self.stats = ScanStats()
        self._cancel = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        """
        Stop handing out new directories; reads already running finish.

        A cancelled scanner stays cancelled, including for a scan that has
        not started yet.
        """
        self._cancel.set()

    def scan(self) -> Iterator[Match]:
        """
        Start a scan and return the stream of matches.

        The root is validated immediately. Matches arrive lazily in no
        particular order; calling ``scan()`` again starts a fresh traversal
        unless the scanner was cancelled, in which case the stream is empty.

        Raises:
            RootInvalid: If the root cannot be scanned
        """
        root = check_root(self.config.root)
        seeds = self._list_root(root)
        self.stats = ScanStats()
        return self._run(seeds)

    def _list_root(self, root: Path) -> list[Path]:
        try:
            return self._list_dirs(root)
        except TraversalError as e:
            raise RootInvalid(root, f"cannot be read ({e.cause.strerror or e.cause})") from e

    def _run(self, seeds: list[Path]) -> Iterator[Match]:
        started = time.monotonic()
        self.stats.directories_visited = 1
        channel: "queue.Queue[Union[Match, _WalkDone]]" = queue.Queue()
        remaining = len(seeds)
        matches = 0

        workers = max(1, min(self.config.workers, len(seeds)))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="depsweep-scan")
        try:
            for seed in seeds:
                executor.submit(self._walk, seed, channel)

            while remaining:
                item = channel.get()
                if isinstance(item, _WalkDone):
                    remaining -= 1
                    self._merge(item)
                    continue
                matches += 1
                yield item
        finally:
            if remaining:
                # Consumer stopped early
                self._cancel.set()
            executor.shutdown(wait=True)
            self.stats.elapsed_seconds = time.monotonic() - started
            self.stats.cancelled = self._cancel.is_set()
            log.info(
                "Scan of %s finished: %d matches, %d directories, %d soft failures in %.2fs",
                self.config.root,
                matches,
                self.stats.directories_visited,
                self.stats.soft_failures,
                self.stats.elapsed_seconds,
            )

    def _merge(self, done: _WalkDone) -> None:
        self.stats.directories_visited += done.visited
        self.stats.soft_failures += done.soft_failures
        room = MAX_RECORDED_FAILURES - len(self.stats.failed_paths)
        if room > 0:
            self.stats.failed_paths.extend(done.failed_paths[:room])

    def _walk(self, seed: Path, channel: queue.Queue) -> None:
        """Traverse one subtree of the root, posting matches as they are measured."""
        done = _WalkDone(seed=seed)
        pending = [seed]
        try:
            while pending:
                if self._cancel.is_set():
                    break

                directory = pending.pop()

                # Exclusion is checked before the target name
                if not self.filter.should_enter(directory):
                    continue

                if self.filter.is_target(directory):
                    match = self._measure(directory, done)
                    if match is not None:
                        channel.put(match)
                    continue

                try:
                    children = self._list_dirs(directory, done)
                except TraversalError as e:
                    log.debug("Skipping %s", e)
                    done.record_failure(directory)
                    continue

                done.visited += 1
                pending.extend(children)
        except Exception:
            log.exception("Traversal below %s stopped unexpectedly", seed)
        finally:
            channel.put(done)

    def _list_dirs(self, directory: Path, done: _WalkDone | None = None) -> list[Path]:
        """List child directories, never following symlinks."""
        children = []
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            children.append(Path(entry.path))
                    except OSError as e:
                        log.debug("Cannot stat %s: %s", entry.path, e)
                        if done is not None:
                            done.record_failure(entry.path)
        except OSError as e:
            raise TraversalError(directory, e) from e
        return children

    def _measure(self, directory: Path, done: _WalkDone) -> Match | None:
        try:
            modified = os.stat(directory, follow_symlinks=False).st_mtime
        except OSError as e:
            log.debug("Cannot stat match %s: %s", directory, e)
            done.record_failure(directory)
            return None

        size, files, _, failures = get_directory_size(directory)
        if failures:
            done.record_failure(directory, failures)

        return Match(
            path=directory,
            size_bytes=size,
            last_modified=datetime.fromtimestamp(modified),
            file_count=files,
            is_dangerous=is_dangerous(directory),
        )


def scan_all(config: ScanConfig) -> tuple[ResultSet, ScanStats]:
    """
    Run a complete scan and collect the matches into a sorted result set.

    Args:
        config: Scan configuration

    Returns:
        Tuple of (results ordered by config.sort_key, scan statistics)
    """
    scanner = Scanner(config)
    results = ResultSet(config.sort_key)
    for match in scanner.scan():
        results.insert(match)
    return results, scanner.stats
