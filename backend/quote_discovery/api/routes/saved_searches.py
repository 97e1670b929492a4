"""Saved Search Routes: create, list, load and delete named query snapshots.

Invariants:
    - POST snapshots the session's CURRENT query + filters (run a search first)
    - /load restores the snapshot and increments use_count by exactly 1
    - DELETE removes unconditionally; the client asks the user to confirm
"""

import logging

from fastapi import APIRouter, Depends, status

from quote_discovery.api.routes.corpus import SessionId
from quote_discovery.schemas.requests import SaveSearchRequest, SearchResponse
from quote_discovery.schemas.search import SavedSearch
from quote_discovery.services.session_registry import EngineRegistry, get_registry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sessions", tags=["saved-searches"])


@router.get("/{session_id}/saved-searches", response_model=list[SavedSearch])
async def list_saved_searches(
    session_id: SessionId,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        return entry.engine.saved_searches


@router.post(
    "/{session_id}/saved-searches",
    response_model=SavedSearch,
    status_code=status.HTTP_201_CREATED,
)
async def save_current_search(
    session_id: SessionId,
    body: SaveSearchRequest,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        saved = entry.engine.save_search(body.name)
        logger.info(
            f"Saved search '{saved.name}'", extra={"session_id": session_id},
        )
        return saved


@router.post(
    "/{session_id}/saved-searches/{search_id}/load",
    response_model=SearchResponse,
)
async def load_saved_search(
    session_id: SessionId,
    search_id: str,
    registry: EngineRegistry = Depends(get_registry),
):
    """Restore a saved search and run it."""
    async with registry.acquire(session_id) as entry:
        entry.engine.load_saved_search(search_id)
        outcome = entry.engine.search()
        return SearchResponse(
            query=outcome.query,
            total=outcome.total,
            recorded=outcome.recorded,
            results=outcome.results,
        )


@router.delete(
    "/{session_id}/saved-searches/{search_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_saved_search(
    session_id: SessionId,
    search_id: str,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        entry.engine.delete_saved_search(search_id)


@router.delete(
    "/{session_id}/saved-searches", status_code=status.HTTP_204_NO_CONTENT,
)
async def clear_saved_searches(
    session_id: SessionId,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        entry.engine.clear_saved_searches()
