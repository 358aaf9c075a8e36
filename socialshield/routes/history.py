"""
history.py — Past classification results.

Routes:
  GET    /api/v1/history              — stored results, most recent first
  POST   /api/v1/history/{id}/select  — show a stored result (no Gemini call)
  DELETE /api/v1/history/{id}         — remove one result (idempotent)
  DELETE /api/v1/history              — remove all results

A failed storage write answers 503 and leaves the history unchanged.

Removing a result never touches reports filed against it.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from socialshield.core.context import get_session
from socialshield.models.session import ActionResponse, HistoryResponse, SessionOut
from socialshield.services.session import SessionController

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/history", tags=["history"])


@router.get("", response_model=HistoryResponse)
async def list_history(session: SessionController = Depends(get_session)):
    items = session.results.items
    return HistoryResponse(items=items, total=len(items), limit=session.results.limit)


@router.post("/{result_id}/select", response_model=ActionResponse)
async def select_result(result_id: str, session: SessionController = Depends(get_session)):
    if not session.select_from_history(result_id):
        raise HTTPException(status_code=404, detail="Result not found in history")
    return ActionResponse(accepted=True, session=SessionOut(**session.snapshot()))


@router.delete("/{result_id}", status_code=204)
async def remove_result(result_id: str, session: SessionController = Depends(get_session)):
    if not await session.remove_from_history(result_id):
        if session.results.get(result_id) is not None:
            raise HTTPException(status_code=503, detail=session.error)
        logger.debug("Remove ignored: %s not in history", result_id)
    return Response(status_code=204)


@router.delete("", status_code=204)
async def clear_history(session: SessionController = Depends(get_session)):
    if not await session.clear_history():
        raise HTTPException(status_code=503, detail=session.error)
    return Response(status_code=204)
