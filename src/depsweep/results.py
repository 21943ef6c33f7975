"""Ordered collection of scan matches."""

from bisect import insort
from pathlib import Path
from typing import Callable, Iterator, Optional

from depsweep.models import Match, SortKey


def sort_key_for(sort_key: SortKey) -> Callable[[Match], tuple]:
    """Build a total-order key; ties always fall back to the path."""
    if sort_key == SortKey.SIZE:
        return lambda m: (-m.size_bytes, str(m.path))
    if sort_key == SortKey.LAST_MOD:
        return lambda m: (m.last_modified, str(m.path))
    return lambda m: (str(m.path),)


class ResultSet:
    """Matches kept in the order of the active sort key, one entry per path."""

    def __init__(self, sort_key: SortKey = SortKey.SIZE) -> None:
        self.sort_key = sort_key
        self._key = sort_key_for(sort_key)
        self._items: list[Match] = []
        self._paths: set[Path] = set()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Match]:
        return iter(self._items)

    def __getitem__(self, index: int) -> Match:
        return self._items[index]

    def get(self, index: int) -> Match:
        return self._items[index]

    def insert(self, match: Match) -> bool:
        """Insert at the sorted position. Returns False for an already known path."""
        if match.path in self._paths:
            return False
        self._paths.add(match.path)
        insort(self._items, match, key=self._key)
        return True

    def reorder(self, sort_key: SortKey, anchor: Optional[Path] = None) -> Optional[int]:
        """
        Sort by a new key.

        Args:
            sort_key: Ordering to apply
            anchor: Path whose new position should be reported

        Returns:
            New index of anchor, or None if it is not in the set
        """
        self.sort_key = sort_key
        self._key = sort_key_for(sort_key)
        self._items.sort(key=self._key)
        if anchor is None:
            return None
        return self.index_of(anchor)

    def index_of(self, path: Path) -> Optional[int]:
        if path not in self._paths:
            return None
        for i, match in enumerate(self._items):
            if match.path == path:
                return i
        return None

    def snapshot(self) -> tuple[Match, ...]:
        """Read-only view of the current order."""
        return tuple(self._items)

    @property
    def total_bytes(self) -> int:
        return sum(m.size_bytes for m in self._items)
