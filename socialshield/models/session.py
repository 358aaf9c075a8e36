"""
session.py — Request / response schemas for the analyzer session API.

InputUpdate       — PUT /api/v1/session/input
ReportRequest     — POST /api/v1/session/report
SessionOut        — full presentation-facing state
ActionResponse    — result of any session action (accepted flag + new state)
RequestState      — request slot: IDLE, SUBMITTING, SUCCEEDED, FAILED
ReportingState    — reporting sub-state: CLOSED, OPEN, SUBMITTED
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from socialshield.models.analysis import ClassificationResult, UserReport


# ── States ────────────────────────────────────────────────────────────────────

class RequestState(str, Enum):
    IDLE = "IDLE"
    SUBMITTING = "SUBMITTING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class ReportingState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    SUBMITTED = "SUBMITTED"


# ── Requests ──────────────────────────────────────────────────────────────────

class InputUpdate(BaseModel):
    """Replace the text waiting to be analysed."""
    text: str = Field(default="", max_length=2000, description="Message, post, comment or DM to analyse")


class ReportRequest(BaseModel):
    """User explanation of why the active classification is wrong. Blank is ignored."""
    reason: str = Field(default="", max_length=2000)


# ── Responses ─────────────────────────────────────────────────────────────────

class SessionOut(BaseModel):
    input_text:    str
    is_submitting: bool
    state:         RequestState
    last_outcome:  Optional[RequestState] = None
    active_result: Optional[ClassificationResult] = None
    error:         Optional[str] = None
    reporting:     ReportingState
    history:       list[ClassificationResult] = Field(default_factory=list)
    report_count:  int


class ActionResponse(BaseModel):
    accepted: bool     # False when the action was silently rejected
    session:  SessionOut


class HistoryResponse(BaseModel):
    items: list[ClassificationResult]
    total: int
    limit: int


class ReportListResponse(BaseModel):
    items: list[UserReport]
    total: int
