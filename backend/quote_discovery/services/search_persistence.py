"""Search Persistence: load/save the history, saved-search and analytics blobs.

Invariants:
    - Read failures (store error, bad JSON, schema mismatch) fall back to empty defaults
    - Write failures are logged and swallowed; callers keep their in-memory state
    - Nothing in this module raises to the engine
    - Blobs are JSON with camelCase keys

Design Decisions:
    - TypeAdapter per blob shape: one validation path for list and object blobs
    - Fail-soft at the storage boundary: search must keep working when storage does not
"""

import logging
from dataclasses import dataclass, field

from pydantic import TypeAdapter, ValidationError

from quote_discovery.core.repository_protocols import KeyValueStore
from quote_discovery.schemas.search import (
    SavedSearch, SearchAnalytics, SearchHistoryItem,
)

logger = logging.getLogger(__name__)

_history_adapter = TypeAdapter(list[SearchHistoryItem])
_saved_adapter = TypeAdapter(list[SavedSearch])
_analytics_adapter = TypeAdapter(SearchAnalytics)


@dataclass(frozen=True)
class StorageKeys:
    history: str = "search-history"
    saved_searches: str = "saved-searches"
    analytics: str = "search-analytics"


@dataclass
class PersistedSearchData:
    history: list[SearchHistoryItem] = field(default_factory=list)
    saved_searches: list[SavedSearch] = field(default_factory=list)
    analytics: SearchAnalytics = field(default_factory=SearchAnalytics)


async def _read(store: KeyValueStore, key: str, adapter: TypeAdapter, default):
    try:
        raw = await store.get(key)
    except Exception as e:
        logger.error(
            f"Failed to read '{key}' from storage: {e}",
            extra={"storage_key": key},
        )
        return default
    if raw is None:
        return default
    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        logger.warning(
            f"Discarding corrupt '{key}' blob: {e.error_count()} error(s)",
            extra={"storage_key": key},
        )
        return default


async def load_search_data(
    store: KeyValueStore, keys: StorageKeys,
) -> PersistedSearchData:
    return PersistedSearchData(
        history=await _read(store, keys.history, _history_adapter, []),
        saved_searches=await _read(store, keys.saved_searches, _saved_adapter, []),
        analytics=await _read(
            store, keys.analytics, _analytics_adapter, SearchAnalytics(),
        ),
    )


def encode_history(items: list[SearchHistoryItem]) -> str:
    return _history_adapter.dump_json(items, by_alias=True).decode()


def encode_saved_searches(items: list[SavedSearch]) -> str:
    return _saved_adapter.dump_json(items, by_alias=True).decode()


def encode_analytics(analytics: SearchAnalytics) -> str:
    return analytics.model_dump_json(by_alias=True)


async def write_blob(store: KeyValueStore, key: str, value: str) -> bool:
    """Write one blob. Returns False (after logging) on failure."""
    try:
        await store.set(key, value)
        return True
    except Exception as e:
        logger.error(
            f"Failed to write '{key}' to storage: {e}",
            extra={"storage_key": key},
        )
        return False
