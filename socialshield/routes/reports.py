"""
reports.py — Read access to filed user reports.

Routes:
  GET /api/v1/reports — every report, most recent first

Reports are write-once; they are created through POST /api/v1/session/report.
"""

from fastapi import APIRouter, Depends

from socialshield.core.context import get_session
from socialshield.models.session import ReportListResponse
from socialshield.services.session import SessionController

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("", response_model=ReportListResponse)
async def list_reports(session: SessionController = Depends(get_session)):
    items = session.reports.items
    return ReportListResponse(items=items, total=len(items))
