"""Corpus View: read-only snapshot of the caller's quotes and collections.

Invariants:
    - Built once per update_data call, never mutated afterwards
    - quotes keep caller order (relevance ordering relies on it)
    - Duplicate quote ids: first occurrence wins
    - collection_names_for(id) lists names in collection order

Design Decisions:
    - Frozen dataclass with precomputed lookups: every search touches them, the
      corpus changes rarely
    - Collections referencing unknown quote ids are kept as-is (membership is
      the caller's business, lookups simply find nothing)
"""

from dataclasses import dataclass, field

from quote_discovery.schemas.quote import Collection, Quote


@dataclass(frozen=True)
class CorpusView:
    """Immutable quotes + collections with id and membership indexes."""

    quotes: tuple[Quote, ...] = ()
    collections: tuple[Collection, ...] = ()
    _by_id: dict[str, Quote] = field(default_factory=dict, repr=False)
    _memberships: dict[str, tuple[Collection, ...]] = field(
        default_factory=dict, repr=False,
    )

    @classmethod
    def build(
        cls, quotes: list[Quote], collections: list[Collection],
    ) -> "CorpusView":
        by_id: dict[str, Quote] = {}
        for q in quotes:
            by_id.setdefault(q.id, q)
        memberships: dict[str, list[Collection]] = {}
        for c in collections:
            for qid in c.quote_ids:
                memberships.setdefault(qid, []).append(c)
        return cls(
            quotes=tuple(by_id.values()),
            collections=tuple(collections),
            _by_id=by_id,
            _memberships={k: tuple(v) for k, v in memberships.items()},
        )

    def __len__(self) -> int:
        return len(self.quotes)

    def get(self, quote_id: str) -> Quote | None:
        return self._by_id.get(quote_id)

    def collections_for(self, quote_id: str) -> tuple[Collection, ...]:
        """Collections that contain the quote."""
        return self._memberships.get(quote_id, ())

    def collection_names_for(self, quote_id: str) -> list[str]:
        return [c.name for c in self.collections_for(quote_id)]

    def find_collection(self, key: str) -> Collection | None:
        """Look up a collection by id, falling back to exact name."""
        for c in self.collections:
            if c.id == key:
                return c
        for c in self.collections:
            if c.name == key:
                return c
        return None
