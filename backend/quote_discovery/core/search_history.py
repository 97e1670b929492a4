"""Search History: capacity-bounded, most-recent-first ring of executed searches.

Invariants:
    - len(items) <= capacity at all times
    - Most recent entry first
    - At most one entry per exact query string; re-recording moves it to the front
    - Eviction drops the oldest entries only

Design Decisions:
    - Owned container over ad hoc list slicing: capacity and eviction live in one place
    - record() returns the evicted items so callers can log what fell off
"""

from quote_discovery.core.domain_types import HISTORY_CAPACITY
from quote_discovery.schemas.search import SearchHistoryItem


class SearchHistory:
    """Bounded search history. Mutated in place, not thread-safe."""

    def __init__(
        self,
        items: list[SearchHistoryItem] | None = None,
        capacity: int = HISTORY_CAPACITY,
    ):
        if capacity < 1:
            raise ValueError("history capacity must be at least 1")
        self.capacity = capacity
        self._items: list[SearchHistoryItem] = []
        # Loaded items are assumed most-recent-first; replay oldest first
        for item in reversed(items or []):
            self.record(item)

    @property
    def items(self) -> list[SearchHistoryItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    def record(self, item: SearchHistoryItem) -> list[SearchHistoryItem]:
        """Push item to the front, replacing any entry with the same query."""
        self._items = [item] + [i for i in self._items if i.query != item.query]
        evicted = self._items[self.capacity:]
        del self._items[self.capacity:]
        return evicted

    def remove(self, query: str) -> bool:
        before = len(self._items)
        self._items = [i for i in self._items if i.query != query]
        return len(self._items) != before

    def clear(self) -> None:
        self._items = []
