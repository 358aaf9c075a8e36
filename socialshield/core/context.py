"""
Application context: the one analyzer session this process serves.

Built once in the FastAPI lifespan over the storage returned by
database.mongo.open(). Both stores are loaded and a SessionController
is wired over them. Routes reach it through the get_session dependency;
tests override that dependency with a controller on in-memory storage.
"""

import logging
from typing import Optional

from fastapi import HTTPException

from socialshield.ai.classifier import ClassificationGateway
from socialshield.core.config import settings
from socialshield.services.history import ResultStore
from socialshield.services.reports import ReportStore
from socialshield.services.session import SessionController

logger = logging.getLogger(__name__)


class AppContext:
    session: Optional[SessionController] = None


app_context = AppContext()


async def build_session(storage, gateway=None) -> SessionController:
    """Load both stores from storage and return a ready controller."""
    results = ResultStore(storage, settings.history_key, settings.history_limit)
    reports = ReportStore(storage, settings.reports_key)
    await results.load()
    await reports.load()
    logger.info("Session ready (%d history entries, %d reports)", len(results), reports.count())
    return SessionController(gateway or ClassificationGateway(), results, reports)


async def open_session(storage) -> None:
    app_context.session = await build_session(storage)


def close_session() -> None:
    if app_context.session is not None:
        app_context.session.close()
        app_context.session = None


def get_session() -> SessionController:
    """FastAPI dependency: the live session, or 503 before startup completes."""
    if app_context.session is None:
        raise HTTPException(status_code=503, detail="Session not initialised")
    return app_context.session
