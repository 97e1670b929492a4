"""Saved search tests: creation rules, use counting, removal."""

from datetime import datetime, timezone

import pytest

from quote_discovery.core.errors import ResourceNotFoundError, SearchValidationError
from quote_discovery.core.saved_searches import (
    create_saved_search, find_saved_search, mark_used, remove_saved_search,
)
from quote_discovery.schemas.search import AdvancedFilters, SearchFilters

NOW = datetime(2024, 5, 15, tzinfo=timezone.utc)


def _create(saved=None, name="Courage", query="bold", filters=None):
    return create_saved_search(
        saved or [], name, query, filters or SearchFilters(), AdvancedFilters(), NOW,
    )


def test_create_snapshots_query_and_filters():
    filters = SearchFilters(author="A")
    saved, entry = _create(filters=filters)
    assert saved == [entry]
    assert entry.query == "bold"
    assert entry.filters.author == "A"
    assert entry.use_count == 0
    assert entry.created_at == NOW


def test_snapshot_is_independent_of_later_edits():
    filters = SearchFilters(author="A")
    _, entry = _create(filters=filters)
    filters.author = "B"
    assert entry.filters.author == "A"


def test_newest_first():
    saved, first = _create(name="one")
    saved, second = _create(saved, name="two")
    assert [s.id for s in saved] == [second.id, first.id]


def test_name_is_trimmed_and_required():
    _, entry = _create(name="  Courage  ")
    assert entry.name == "Courage"
    with pytest.raises(SearchValidationError):
        _create(name="   ")


def test_cannot_save_without_intent():
    with pytest.raises(SearchValidationError):
        _create(query="  ")


def test_filters_alone_can_be_saved():
    _, entry = _create(query="", filters=SearchFilters(category="wisdom"))
    assert entry.filters.category == "wisdom"


def test_mark_used_increments_by_one():
    saved, entry = _create()
    saved, updated = mark_used(saved, entry.id)
    saved, updated = mark_used(saved, entry.id)
    assert updated.use_count == 2
    assert find_saved_search(saved, entry.id).use_count == 2


def test_unknown_id_raises_not_found():
    with pytest.raises(ResourceNotFoundError):
        mark_used([], "missing")
    with pytest.raises(ResourceNotFoundError):
        remove_saved_search([], "missing")


def test_remove():
    saved, entry = _create()
    assert remove_saved_search(saved, entry.id) == []
