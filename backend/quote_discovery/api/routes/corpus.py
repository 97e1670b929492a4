"""Corpus Routes: replace a session's quote snapshot, drop a session.

Invariants:
    - PUT replaces the whole corpus (no incremental contract)
    - Malformed entries are dropped and counted, never fail the request
    - DELETE flushes pending writes before forgetting the engine

Design Decisions:
    - Session ids are opaque client strings: the client owns its identity
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from quote_discovery.core.errors import ResourceNotFoundError
from quote_discovery.schemas.requests import CorpusUpdate, CorpusUpdateResponse
from quote_discovery.services.session_registry import EngineRegistry, get_registry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sessions", tags=["corpus"])

SessionId = Annotated[str, Path(min_length=1, max_length=100)]


@router.put("/{session_id}/corpus", response_model=CorpusUpdateResponse)
async def replace_corpus(
    session_id: SessionId,
    body: CorpusUpdate,
    registry: EngineRegistry = Depends(get_registry),
):
    """Replace the session's quotes and collections."""
    async with registry.acquire(session_id) as entry:
        report = entry.corpus.replace(body.quotes, body.collections)
        logger.info(
            f"Corpus replaced: {report.accepted_quotes} quotes accepted, "
            f"{report.rejected_quotes} rejected",
            extra={"session_id": session_id},
        )
        return CorpusUpdateResponse(
            report=report,
            total_quotes=len(entry.engine.corpus),
            total_collections=len(entry.engine.corpus.collections),
        )


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def drop_session(
    session_id: SessionId,
    registry: EngineRegistry = Depends(get_registry),
):
    """Forget the in-memory engine. Persisted search data stays in storage."""
    if not await registry.drop(session_id):
        raise ResourceNotFoundError("Session", session_id)
