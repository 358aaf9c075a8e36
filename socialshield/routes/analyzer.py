"""
analyzer.py — Session state and analysis actions.

Routes:
  GET    /api/v1/session                — current state snapshot
  PUT    /api/v1/session/input          — update the text to analyse
  POST   /api/v1/session/submit         — classify the current text (rate limited)
  DELETE /api/v1/session/active         — dismiss the displayed result
  POST   /api/v1/session/report/open    — open the report form for the displayed result
  POST   /api/v1/session/report/cancel  — close the report form without sending
  POST   /api/v1/session/report         — file a report against the displayed result

Every action answers 200 with {accepted, session}. A rejected action (blank
input, request already in flight, blank reason, no displayed result) comes
back with accepted=false and the unchanged state. Gateway failures are not
HTTP errors either; they show up in session.error.
"""

import logging

from fastapi import APIRouter, Depends, Request

from socialshield.core.config import settings
from socialshield.core.context import get_session
from socialshield.core.rate_limit import limiter
from socialshield.models.session import ActionResponse, InputUpdate, ReportRequest, SessionOut
from socialshield.services.session import SessionController

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/session", tags=["session"])


def _respond(session: SessionController, accepted: bool) -> ActionResponse:
    return ActionResponse(accepted=accepted, session=SessionOut(**session.snapshot()))


@router.get("", response_model=SessionOut)
async def read_session(session: SessionController = Depends(get_session)):
    return SessionOut(**session.snapshot())


@router.put("/input", response_model=ActionResponse)
async def update_input(payload: InputUpdate, session: SessionController = Depends(get_session)):
    session.set_input(payload.text)
    return _respond(session, True)


@router.post("/submit", response_model=ActionResponse)
@limiter.limit(settings.submit_rate_limit)
async def submit(request: Request, session: SessionController = Depends(get_session)):
    """
    Send the current input to Gemini and wait for the verdict.

    Returns once the call resolves. A second submit while one is in flight
    is rejected immediately with accepted=false.
    """
    accepted = await session.submit()
    return _respond(session, accepted)


@router.delete("/active", response_model=ActionResponse)
async def dismiss_active(session: SessionController = Depends(get_session)):
    session.dismiss_active_result()
    return _respond(session, True)


# ── Reporting ──────────────────────────────────────────────────────────────────

@router.post("/report/open", response_model=ActionResponse)
async def open_report(session: SessionController = Depends(get_session)):
    return _respond(session, session.open_report())


@router.post("/report/cancel", response_model=ActionResponse)
async def cancel_report(session: SessionController = Depends(get_session)):
    return _respond(session, session.cancel_report())


@router.post("/report", response_model=ActionResponse)
async def submit_report(payload: ReportRequest, session: SessionController = Depends(get_session)):
    accepted = await session.submit_report(payload.reason)
    return _respond(session, accepted)
