"""Selection & Bulk Routes: manage the selection set and run bulk operations.

Invariants:
    - select-all selects exactly the last result list
    - POST /bulk always leaves the selection empty, even when the operation fails
    - Export returns the document in the response body

Design Decisions:
    - Per-item failures come back in the outcome (200), not as an error status:
      the client needs to know which ids made it
"""

import logging

from fastapi import APIRouter, Depends

from quote_discovery.api.routes.corpus import SessionId
from quote_discovery.schemas.requests import (
    BulkOperationRequest, SelectionResponse, SelectionUpdate,
)
from quote_discovery.schemas.search import BulkOperationOutcome
from quote_discovery.services.session_registry import EngineRegistry, get_registry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sessions", tags=["bulk"])


def _selection(engine) -> SelectionResponse:
    ids = engine.selection
    return SelectionResponse(quote_ids=ids, count=len(ids))


@router.get("/{session_id}/selection", response_model=SelectionResponse)
async def get_selection(
    session_id: SessionId,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        return _selection(entry.engine)


@router.post("/{session_id}/selection", response_model=SelectionResponse)
async def add_to_selection(
    session_id: SessionId,
    body: SelectionUpdate,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        for quote_id in body.quote_ids:
            entry.engine.select(quote_id)
        return _selection(entry.engine)


@router.post("/{session_id}/selection/remove", response_model=SelectionResponse)
async def remove_from_selection(
    session_id: SessionId,
    body: SelectionUpdate,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        for quote_id in body.quote_ids:
            entry.engine.deselect(quote_id)
        return _selection(entry.engine)


@router.post("/{session_id}/selection/select-all", response_model=SelectionResponse)
async def select_all(
    session_id: SessionId,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        entry.engine.select_all()
        return _selection(entry.engine)


@router.delete("/{session_id}/selection", response_model=SelectionResponse)
async def clear_selection(
    session_id: SessionId,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        entry.engine.clear_selection()
        return _selection(entry.engine)


@router.post("/{session_id}/bulk", response_model=BulkOperationOutcome)
async def run_bulk_operation(
    session_id: SessionId,
    body: BulkOperationRequest,
    registry: EngineRegistry = Depends(get_registry),
):
    async with registry.acquire(session_id) as entry:
        return await entry.engine.run_bulk_operation(
            body.type, body.target_collection,
        )
