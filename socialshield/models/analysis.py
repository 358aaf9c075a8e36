"""
analysis.py — Pydantic models for classification results and user reports.

AnalysisStatus        — closed verdict set (SCAM / RISK / SAFE)
ClassificationResult  — one completed analysis, immutable once created
UserReport            — user disagreement with a result, snapshotted at report time
"""

from datetime import datetime, timezone
from enum import Enum

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class AnalysisStatus(str, Enum):
    SCAM = "SCAM"    # clear fraudulent intent
    RISK = "RISK"    # suspicious patterns, not definitive
    SAFE = "SAFE"    # normal conversation, no red flags


def _new_id() -> str:
    return str(ObjectId())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Classification result ─────────────────────────────────────────────────────

class ClassificationResult(BaseModel):
    """A completed analysis of one submitted message."""

    model_config = ConfigDict(frozen=True)

    id:              str            = Field(default_factory=_new_id)
    created_at:      datetime       = Field(default_factory=_utcnow)
    input_text:      str
    status:          AnalysisStatus
    risk_score:      float          = Field(ge=0, le=100)
    explanation:     str
    flagged_phrases: list[str]      = Field(default_factory=list)
    actionable_tips: list[str]      = Field(min_length=1)


# ── User report ───────────────────────────────────────────────────────────────

class UserReport(BaseModel):
    """
    A user's claim that a classification was wrong.

    message_id is a weak reference: the result may leave the history while
    the report stays. content and ai_classification are copies for that reason.
    """

    model_config = ConfigDict(frozen=True)

    message_id:        str
    content:           str
    ai_classification: AnalysisStatus
    user_reason:       str = Field(min_length=1)
    created_at:        datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_result(cls, result: ClassificationResult, reason: str) -> "UserReport":
        return cls(
            message_id=result.id,
            content=result.input_text,
            ai_classification=result.status,
            user_reason=reason,
        )


# Adapters used to (de)serialise whole collections to a single JSON array.
ResultList = TypeAdapter(list[ClassificationResult])
ReportList = TypeAdapter(list[UserReport])
