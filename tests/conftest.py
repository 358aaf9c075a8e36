"""
pytest configuration and shared fixtures for the SocialShield API tests.

Tests must not require a live MongoDB or Gemini API key:
  1. database.mongo.open() returns in-memory storage, close() is a no-op
     and the connection is left disconnected.
  2. AI_MOCK_MODE=true so GeminiClient returns canned responses.
  3. Session tests use a scripted FakeGateway and in-memory storage, wired
     through the same build_session() the lifespan uses.
"""

import asyncio
import os
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ.setdefault("AI_MOCK_MODE", "true")
os.environ.setdefault("ENVIRONMENT", "test")


class FakeGateway:
    """
    Scripted stand-in for ClassificationGateway.

    outcomes: queue of dicts (fields for the returned result) or exceptions.
    gate:     when set to an asyncio.Event, classify() waits on it first.
    """

    def __init__(self):
        self.calls: list[str] = []
        self.outcomes: list = []
        self.gate: asyncio.Event | None = None

    async def classify(self, text):
        from socialshield.models.analysis import ClassificationResult

        self.calls.append(text)
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0) if self.outcomes else {}
        if isinstance(outcome, Exception):
            raise outcome
        fields = {
            "status": "SAFE",
            "risk_score": 5,
            "explanation": "Looks like a normal conversation.",
            "flagged_phrases": [],
            "actionable_tips": ["Stay vigilant online."],
        }
        fields.update(outcome)
        return ClassificationResult(input_text=text, **fields)


@pytest.fixture(autouse=True)
async def mock_db():
    """Keep the Mongo lifecycle offline for every test."""
    import socialshield.core.database as db_module
    from socialshield.core.storage import MemoryKeyValueStorage

    original_client = db_module.mongo.client
    db_module.mongo.client = None
    with (
        patch.object(db_module.mongo, "open", new=AsyncMock(side_effect=lambda collection: MemoryKeyValueStorage())),
        patch.object(db_module.mongo, "close"),
    ):
        yield
    db_module.mongo.client = original_client


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
async def session(gateway):
    """A SessionController on empty in-memory storage."""
    from socialshield.core.context import build_session
    from socialshield.core.storage import MemoryKeyValueStorage

    return await build_session(MemoryKeyValueStorage(), gateway=gateway)


@pytest.fixture()
def flaky_storage():
    """In-memory storage whose writes raise ConnectionError while .offline is True."""
    from socialshield.core.storage import MemoryKeyValueStorage

    class FlakyStorage(MemoryKeyValueStorage):
        offline = False

        async def set(self, key, value):
            if self.offline:
                raise ConnectionError("storage offline")
            await super().set(key, value)

    return FlakyStorage()


@pytest.fixture()
async def flaky_session(gateway, flaky_storage):
    """A SessionController over flaky_storage."""
    from socialshield.core.context import build_session

    return await build_session(flaky_storage, gateway=gateway)


@pytest.fixture()
def make_result():
    """Factory for ClassificationResult records with sensible defaults."""
    from socialshield.models.analysis import ClassificationResult

    def _make(text="hello there", **overrides):
        fields = {
            "input_text": text,
            "status": "SAFE",
            "risk_score": 10,
            "explanation": "Nothing unusual.",
            "flagged_phrases": [],
            "actionable_tips": ["Stay vigilant online."],
        }
        fields.update(overrides)
        return ClassificationResult(**fields)

    return _make


@pytest.fixture()
async def client(session):
    """
    HTTPX async test client wired to the FastAPI app, with get_session
    overridden to the fixture session and rate-limit counters reset.
    """
    from socialshield.core.context import get_session
    from socialshield.core.rate_limit import limiter
    from socialshield.main import app

    limiter.reset()
    app.dependency_overrides[get_session] = lambda: session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
