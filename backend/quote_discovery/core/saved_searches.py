"""Saved Searches: pure operations over the list of named query snapshots.

Invariants:
    - Newest saved search first
    - Name is trimmed and non-empty
    - A search can only be saved when it expresses intent (query or active filter)
    - mark_used increments use_count by exactly 1, other entries untouched
    - Functions return new lists; inputs are never mutated

Design Decisions:
    - Deep copies of the filter objects: later edits to the live filters must
      not leak into a snapshot
    - Unknown ids raise ResourceNotFoundError rather than silently no-op
"""

import uuid
from datetime import datetime

from quote_discovery.core.errors import ResourceNotFoundError, SearchValidationError
from quote_discovery.core.query_matcher import has_search_intent
from quote_discovery.schemas.search import AdvancedFilters, SavedSearch, SearchFilters


def create_saved_search(
    saved: list[SavedSearch],
    name: str,
    query: str,
    filters: SearchFilters,
    advanced: AdvancedFilters,
    now: datetime,
) -> tuple[list[SavedSearch], SavedSearch]:
    """Snapshot query + filters under a name. Returns (new list, new entry)."""
    name = name.strip()
    if not name:
        raise SearchValidationError("Saved search name cannot be empty", "name")
    if not has_search_intent(query, filters, advanced):
        raise SearchValidationError(
            "Enter a search query or apply filters before saving", "query",
        )
    entry = SavedSearch(
        id=uuid.uuid4().hex,
        name=name,
        query=query,
        filters=filters.model_copy(deep=True),
        advanced_filters=advanced.model_copy(deep=True),
        created_at=now,
        use_count=0,
    )
    return [entry, *saved], entry


def find_saved_search(saved: list[SavedSearch], search_id: str) -> SavedSearch:
    for s in saved:
        if s.id == search_id:
            return s
    raise ResourceNotFoundError("SavedSearch", search_id)


def mark_used(
    saved: list[SavedSearch], search_id: str,
) -> tuple[list[SavedSearch], SavedSearch]:
    """Increment use_count of one entry. Returns (new list, updated entry)."""
    target = find_saved_search(saved, search_id)
    updated = target.model_copy(update={"use_count": target.use_count + 1})
    return [updated if s.id == search_id else s for s in saved], updated


def remove_saved_search(
    saved: list[SavedSearch], search_id: str,
) -> list[SavedSearch]:
    find_saved_search(saved, search_id)
    return [s for s in saved if s.id != search_id]
