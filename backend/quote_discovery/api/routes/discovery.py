"""Discovery Routes: analytics, insights, recommendations and related content.

Invariants:
    - Read-only: none of these endpoints mutate engine state
    - Insights and recommendations are recomputed per request
    - Related content for an unknown quote id → 404
"""

from fastapi import APIRouter, Depends, Query

from quote_discovery.api.routes.corpus import SessionId
from quote_discovery.schemas.search import (
    QueryCount, RelatedContent, SearchAnalytics, SearchInsights,
    SmartRecommendation,
)
from quote_discovery.services.session_registry import EngineRegistry, get_registry

router = APIRouter(prefix="/api/v1/sessions", tags=["discovery"])


@router.get("/{session_id}/analytics", response_model=SearchAnalytics)
async def get_analytics(
    session_id: SessionId,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        return entry.engine.analytics


@router.get(
    "/{session_id}/analytics/popular-searches", response_model=list[QueryCount],
)
async def get_popular_searches(
    session_id: SessionId,
    limit: int = Query(5, ge=1, le=50),
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        return entry.engine.popular_searches(limit)


@router.get("/{session_id}/insights", response_model=SearchInsights)
async def get_insights(
    session_id: SessionId,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        return entry.engine.insights()


@router.get(
    "/{session_id}/recommendations", response_model=list[SmartRecommendation],
)
async def get_recommendations(
    session_id: SessionId,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        return entry.engine.recommendations()


@router.get(
    "/{session_id}/quotes/{quote_id}/related", response_model=RelatedContent,
)
async def get_related_content(
    session_id: SessionId,
    quote_id: str,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        return entry.engine.related_content(quote_id)
