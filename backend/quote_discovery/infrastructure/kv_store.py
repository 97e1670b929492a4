"""Key-Value Stores: implementations of the KeyValueStore boundary protocol.

Invariants:
    - get() of a never-written key returns None
    - set() overwrites; last write wins
    - SqlKeyValueStore scopes every key by namespace (the session id)
    - Database failures surface as DatabaseError (mapped by DatabaseSessionManager)

Design Decisions:
    - InMemoryKeyValueStore is a real adapter, not a test double: the "memory"
      storage backend uses it when no database is configured
    - Read-then-write upsert instead of dialect-specific ON CONFLICT: works on
      PostgreSQL and SQLite alike
"""

from sqlalchemy import select

from quote_discovery.infrastructure.database import DatabaseSessionManager
from quote_discovery.models.storage_entry import StorageEntry


class InMemoryKeyValueStore:
    """Process-local blob storage."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlKeyValueStore:
    """Blob storage in the storage_entries table, one namespace per session."""

    def __init__(self, manager: DatabaseSessionManager, namespace: str):
        self._manager = manager
        self.namespace = namespace

    async def get(self, key: str) -> str | None:
        async with self._manager.session() as db:
            result = await db.execute(
                select(StorageEntry.value)
                .where(StorageEntry.namespace == self.namespace)
                .where(StorageEntry.key == key),
            )
            return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        async with self._manager.session() as db:
            entry = await db.get(StorageEntry, (self.namespace, key))
            if entry is None:
                db.add(StorageEntry(namespace=self.namespace, key=key, value=value))
            else:
                entry.value = value
            await db.commit()
