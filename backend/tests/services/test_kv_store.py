"""Key-value store tests: SQL adapter on in-memory SQLite, namespace isolation."""

import pytest

from quote_discovery.infrastructure.database import DatabaseSessionManager
from quote_discovery.infrastructure.kv_store import (
    InMemoryKeyValueStore, SqlKeyValueStore,
)


@pytest.fixture
async def manager():
    mgr = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await mgr.create_tables()
    yield mgr
    await mgr.dispose()


async def test_missing_key_returns_none(manager):
    assert await SqlKeyValueStore(manager, "s1").get("search-history") is None


async def test_set_then_overwrite(manager):
    store = SqlKeyValueStore(manager, "s1")
    await store.set("search-history", "[]")
    await store.set("search-history", '[{"query": "x"}]')
    assert await store.get("search-history") == '[{"query": "x"}]'


async def test_namespaces_are_isolated(manager):
    await SqlKeyValueStore(manager, "s1").set("k", "one")
    await SqlKeyValueStore(manager, "s2").set("k", "two")
    assert await SqlKeyValueStore(manager, "s1").get("k") == "one"
    assert await SqlKeyValueStore(manager, "s2").get("k") == "two"


async def test_health_check(manager):
    assert await manager.health_check()


async def test_in_memory_store():
    store = InMemoryKeyValueStore({"a": "1"})
    assert await store.get("a") == "1"
    await store.set("a", "2")
    assert store.data == {"a": "2"}
