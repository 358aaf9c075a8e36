"""
classifier.py — Gemini-backed classification gateway.

HOW A CLASSIFICATION WORKS
──────────────────────────
1. The session controller hands over the raw message text.
2. Gemini receives the text as user content, with _SYSTEM_INSTRUCTION bound
   as the system prompt and a JSON response schema (_RESPONSE_SCHEMA).
3. The JSON object is pulled out of the reply by _parse_json_object().
4. _normalise() fills defaults and coerces fields into a ClassificationResult.
5. Any failure (SDK error, empty output, unparseable JSON) is logged and
   re-raised as ClassificationError with a single user-facing message.

NORMALISATION RULES
───────────────────
  status          — SCAM | RISK | SAFE (case-insensitive); anything else → SAFE
  riskScore       — 0 if absent or non-numeric; clamped into [0, 100]
  explanation     — fixed fallback sentence if absent or blank
  flaggedPhrases  — [] if absent
  actionableTips  — one fixed fallback tip if absent or empty

status and riskScore are taken independently. A reply of SAFE with a score
of 95 is kept as-is.
"""

import json
import logging
import re
from typing import Any, Optional

from socialshield.ai.gemini_client import GeminiClient, gemini_client
from socialshield.models.analysis import AnalysisStatus, ClassificationResult

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to analyze the message. Please try again later."
DEFAULT_EXPLANATION = "No suspicious patterns detected."
DEFAULT_TIP = "Stay vigilant online."


class ClassificationError(Exception):
    """The gateway could not produce a result. str(exc) is safe to show users."""


# ── Prompt + schema ────────────────────────────────────────────────────────────

_SYSTEM_INSTRUCTION = """\
You are a world-class AI scam detection specialist for social media.
Your task is to analyze text messages, posts, comments, or DMs to identify:
1. Phishing attempts
2. Impersonation (scammers pretending to be official support or celebrities)
3. Urgency-based manipulation ("Act now!", "Account suspended")
4. Fake offers/Lotteries ("You won!", "Get rich quick")
5. Malicious or suspicious links
6. Requests for sensitive data (OTP, password, SSN, credit card)

Be friendly, non-alarming, but firm in your classification.
Classify as:
- SCAM: Clear fraudulent intent.
- RISK: Suspicious patterns, unusual requests, but not definitive.
- SAFE: Normal conversation, no red flags.

Return the analysis in JSON format."""

_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "status": {
            "type": "STRING",
            "description": "Must be SCAM, RISK, or SAFE",
        },
        "riskScore": {
            "type": "NUMBER",
            "description": "0 to 100 risk probability",
        },
        "explanation": {
            "type": "STRING",
            "description": "Brief explanation of the analysis in simple language",
        },
        "flaggedPhrases": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Specific parts of the text that are suspicious",
        },
        "actionableTips": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Actionable advice for the user",
        },
    },
}

_GENERATION_CONFIG = {
    "response_mime_type": "application/json",
    "response_schema": _RESPONSE_SCHEMA,
}


# ── Parsing helpers ────────────────────────────────────────────────────────────

def _parse_json_object(raw: str) -> Optional[dict]:
    m = re.search(r"\{[\s\S]*\}", raw or "")
    if not m:
        return None
    try:
        data = json.loads(m.group())
    except (json.JSONDecodeError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def _status(value: Any) -> AnalysisStatus:
    try:
        return AnalysisStatus(str(value).strip().upper())
    except ValueError:
        return AnalysisStatus.SAFE


def _risk_score(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return max(0.0, min(100.0, float(value)))


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


def _normalise(text: str, data: dict) -> ClassificationResult:
    explanation = data.get("explanation")
    if not isinstance(explanation, str) or not explanation.strip():
        explanation = DEFAULT_EXPLANATION

    return ClassificationResult(
        input_text=text,
        status=_status(data.get("status")),
        risk_score=_risk_score(data.get("riskScore")),
        explanation=explanation,
        flagged_phrases=_strings(data.get("flaggedPhrases")),
        actionable_tips=_strings(data.get("actionableTips")) or [DEFAULT_TIP],
    )


# ── Gateway ────────────────────────────────────────────────────────────────────

class ClassificationGateway:
    def __init__(self, client: Optional[GeminiClient] = None) -> None:
        self._client = client or gemini_client

    async def classify(self, text: str) -> ClassificationResult:
        """
        Classify one message.

        Raises:
            ClassificationError: on any SDK, transport, or parsing failure.
        """
        try:
            raw = await self._client.generate(
                text,
                response_key="classify",
                system_instruction=_SYSTEM_INSTRUCTION,
                generation_config=_GENERATION_CONFIG,
            )
        except Exception as exc:
            logger.error("Gemini analysis error: %s", exc)
            raise ClassificationError(FAILURE_MESSAGE) from exc

        data = _parse_json_object(raw)
        if data is None:
            logger.error("Gemini returned no parseable JSON object: %.200r", raw)
            raise ClassificationError(FAILURE_MESSAGE)

        result = _normalise(text, data)
        logger.info("Classified message %s as %s (risk %.0f)", result.id, result.status.value, result.risk_score)
        return result
