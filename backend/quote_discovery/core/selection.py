"""Selection Set: insertion-ordered set of quote ids targeted by bulk operations.

Invariants:
    - No duplicate ids
    - Iteration order is insertion order (deterministic bulk dispatch)
    - select_all replaces the selection with exactly the given result ids
    - Individual select/deselect is unrestricted by the current results
"""

from collections.abc import Iterable


class SelectionSet:
    """Owned container for selected quote ids. Mutated in place, not thread-safe."""

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: dict[str, None] = dict.fromkeys(ids)

    def __contains__(self, quote_id: object) -> bool:
        return quote_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(list(self._ids))

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    def select(self, quote_id: str) -> None:
        self._ids.setdefault(quote_id, None)

    def deselect(self, quote_id: str) -> None:
        self._ids.pop(quote_id, None)

    def toggle(self, quote_id: str) -> bool:
        """Flip membership. Returns True if the id is now selected."""
        if quote_id in self._ids:
            del self._ids[quote_id]
            return False
        self._ids[quote_id] = None
        return True

    def select_all(self, quote_ids: Iterable[str]) -> None:
        self._ids = dict.fromkeys(quote_ids)

    def clear(self) -> None:
        self._ids = {}
