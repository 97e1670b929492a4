"""Session Registry: one discovery engine per session, used under exclusive access.

Invariants:
    - At most one engine per session id per process
    - acquire() holds the session's asyncio.Lock for the whole block: no two
      requests touch the same engine concurrently
    - A new engine has loaded its persisted data before it is handed out
    - close() flushes every engine's pending writes

Design Decisions:
    - Module-level singleton: single-process uvicorn, engines are in-memory and
      rebuilt from storage after a restart (corpus must be re-sent by the client)
    - Store factory injected: SQL namespace per session or in-memory dicts
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from quote_discovery.config import Settings, get_settings
from quote_discovery.core.repository_protocols import KeyValueStore
from quote_discovery.infrastructure.kv_store import InMemoryKeyValueStore
from quote_discovery.services.discovery_engine import DiscoveryEngine
from quote_discovery.services.session_corpus import SessionCorpus

logger = logging.getLogger(__name__)

StoreFactory = Callable[[str], KeyValueStore]


@dataclass
class SessionEntry:
    engine: DiscoveryEngine
    corpus: SessionCorpus
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class EngineRegistry:
    """Creates, caches and guards per-session engines."""

    def __init__(self, store_factory: StoreFactory, settings: Settings | None = None):
        self._store_factory = store_factory
        self._settings = settings or get_settings()
        self._sessions: dict[str, SessionEntry] = {}
        self._create_lock = asyncio.Lock()

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    async def _get_or_create(self, session_id: str) -> SessionEntry:
        async with self._create_lock:
            entry = self._sessions.get(session_id)
            if entry is not None:
                return entry
            corpus = SessionCorpus()
            engine = DiscoveryEngine(
                self._store_factory(session_id),
                collaborator=corpus,
                settings=self._settings,
                session_id=session_id,
            )
            corpus.attach(engine)
            await engine.load()
            entry = SessionEntry(engine=engine, corpus=corpus)
            self._sessions[session_id] = entry
            logger.info("Engine created", extra={"session_id": session_id})
            return entry

    @asynccontextmanager
    async def acquire(self, session_id: str) -> AsyncIterator[SessionEntry]:
        entry = await self._get_or_create(session_id)
        async with entry.lock:
            yield entry

    async def drop(self, session_id: str) -> bool:
        entry = self._sessions.pop(session_id, None)
        if entry is None:
            return False
        async with entry.lock:
            await entry.engine.flush()
        return True

    async def close(self) -> None:
        for session_id in list(self._sessions):
            await self.drop(session_id)


# Singleton (initialized on startup; memory-backed fallback when not configured)
_registry: EngineRegistry | None = None


def init_registry(store_factory: StoreFactory, settings: Settings | None = None) -> EngineRegistry:
    global _registry
    _registry = EngineRegistry(store_factory, settings)
    return _registry


def get_registry() -> EngineRegistry:
    """FastAPI dependency for the engine registry."""
    global _registry
    if _registry is None:
        stores: dict[str, InMemoryKeyValueStore] = {}
        _registry = EngineRegistry(
            lambda sid: stores.setdefault(sid, InMemoryKeyValueStore()),
        )
    return _registry


def reset_registry() -> None:
    global _registry
    _registry = None
