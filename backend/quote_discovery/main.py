"""Quote Discovery API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DiscoveryError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Storage and engine registry initialized on startup via lifespan;
      pending engine writes flushed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - storage_backend "database": one SQL namespace per session;
      "memory": process-local dicts, nothing survives a restart
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quote_discovery.api.error_handlers import register_error_handlers
from quote_discovery.api.routes import (
    bulk, corpus, discovery, health, saved_searches, search,
)
from quote_discovery.config import get_settings
from quote_discovery.infrastructure.database import init_db
from quote_discovery.infrastructure.kv_store import (
    InMemoryKeyValueStore, SqlKeyValueStore,
)
from quote_discovery.infrastructure.observability import setup_logging
from quote_discovery.services.session_registry import init_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    manager = None
    if settings.storage_backend == "database":
        manager = init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.database_url.startswith("sqlite"):
            await manager.create_tables()
        registry = init_registry(
            lambda sid: SqlKeyValueStore(manager, sid), settings,
        )
    else:
        stores: dict[str, InMemoryKeyValueStore] = {}
        registry = init_registry(
            lambda sid: stores.setdefault(sid, InMemoryKeyValueStore()), settings,
        )

    logger.info(f"Quote Discovery API started ({settings.storage_backend} storage)")
    yield
    await registry.close()
    if manager is not None:
        await manager.dispose()
    logger.info("Quote Discovery API shutting down")


app = FastAPI(
    title="Quote Discovery API", version="1.0.0", lifespan=lifespan,
)

# CORS: configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(corpus.router)
app.include_router(search.router)
app.include_router(saved_searches.router)
app.include_router(discovery.router)
app.include_router(bulk.router)

register_error_handlers(app)
