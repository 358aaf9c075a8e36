"""
Health check endpoint.

Returns status + DB connectivity so callers can distinguish between
"API down" and "API up but history is only kept in memory".
"""

from fastapi import APIRouter
from pydantic import BaseModel

from socialshield.core import database as db_module
from socialshield.core.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    status: str  # Always "ok" if the API process is alive
    version: str
    database: str  # "connected" | "disconnected"
    ai_mode: str  # "mock" | "real"
    environment: str


@router.get("", response_model=HealthResponse, summary="API health check")
async def health_check() -> HealthResponse:
    """
    Liveness of the API and its database connection.

    HTTP 200 even when the database is disconnected; the service keeps
    working on in-memory storage in that case.
    """
    from socialshield.ai.gemini_client import gemini_client

    connected = await db_module.mongo.ping()

    return HealthResponse(
        status="ok",
        version="0.1.0",
        database="connected" if connected else "disconnected",
        ai_mode="mock" if gemini_client.mock_mode else "real",
        environment=settings.environment,
    )
