"""Search Routes: execute searches, single-field lookups, suggestions and history.

Invariants:
    - POST /search records history + analytics only when the search expresses intent
    - Field search and suggestions never touch history
    - History is returned most-recent-first

Design Decisions:
    - Search state (query, filters) lives in the session engine: omitted request
      fields reuse it, so a client can re-run after loading a saved search
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from quote_discovery.api.routes.corpus import SessionId
from quote_discovery.core.domain_types import SearchField
from quote_discovery.schemas.quote import Quote
from quote_discovery.schemas.requests import SearchRequest, SearchResponse
from quote_discovery.schemas.search import SearchHistoryItem
from quote_discovery.services.session_registry import EngineRegistry, get_registry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sessions", tags=["search"])


@router.post("/{session_id}/search", response_model=SearchResponse)
async def run_search(
    session_id: SessionId,
    body: SearchRequest,
    registry: EngineRegistry = Depends(get_registry),
):
    """Run a search with the given (or current) query and filters."""
    async with registry.acquire(session_id) as entry:
        outcome = entry.engine.search(
            body.query, body.filters, body.advanced_filters,
        )
        return SearchResponse(
            query=outcome.query,
            total=outcome.total,
            recorded=outcome.recorded,
            results=outcome.results,
        )


@router.get("/{session_id}/search/field", response_model=list[Quote])
async def search_single_field(
    session_id: SessionId,
    q: str = Query(..., min_length=1, max_length=1000),
    field: SearchField = Query(SearchField.TEXT),
    registry: EngineRegistry = Depends(get_registry),
):
    """Match one field across the whole corpus."""
    async with registry.acquire(session_id) as entry:
        return entry.engine.search_by_field(q, field)


@router.get("/{session_id}/suggestions", response_model=list[str])
async def get_suggestions(
    session_id: SessionId,
    q: str = Query("", max_length=1000),
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        return entry.engine.suggestions(q)


@router.get("/{session_id}/history", response_model=list[SearchHistoryItem])
async def get_history(
    session_id: SessionId,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        return entry.engine.history


@router.delete("/{session_id}/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(
    session_id: SessionId,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        entry.engine.clear_history()


@router.delete(
    "/{session_id}/history/entry", status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_history_entry(
    session_id: SessionId,
    query: str = Query(..., min_length=1),
    registry: EngineRegistry = Depends(get_registry),
):
    """Remove one history entry by its exact query string."""
    async with registry.acquire(session_id) as entry:
        entry.engine.remove_history_entry(query)
