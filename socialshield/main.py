"""
SocialShield API — Application entry point.

Bootstraps FastAPI, wires up middleware, registers route groups,
and manages the MongoDB connection and analyzer session lifecycle.

Extension points:
  - Add new route groups with app.include_router() below
  - Change startup behaviour in the lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from socialshield.core import database
from socialshield.core.config import settings
from socialshield.core.context import close_session, open_session
from socialshield.core.rate_limit import limiter
from socialshield.routes.analyzer import router as analyzer_router
from socialshield.routes.health import router as health_router
from socialshield.routes.history import router as history_router
from socialshield.routes.reports import router as reports_router

# ─── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ─── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: connect to MongoDB, load history + reports, build the session.
    Shutdown: close the session (late Gemini replies are dropped), then Mongo.
    """
    logger.info("Starting SocialShield API (env: %s)", settings.environment)
    storage = await database.mongo.open(settings.storage_collection)
    await open_session(storage)
    yield
    logger.info("Shutting down SocialShield API")
    close_session()
    database.mongo.close()


# ─── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="SocialShield API",
    description=(
        "Social-media scam detection: paste a message, get a SCAM / RISK / SAFE "
        "verdict with an explanation and safety tips. AI results are probabilistic."
    ),
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
)


# ─── Rate limiting ─────────────────────────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ─── Middleware ─────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Routes ────────────────────────────────────────────────────────────────────
app.include_router(health_router, prefix="/health", tags=["health"])
app.include_router(analyzer_router)
app.include_router(history_router)
app.include_router(reports_router)


@app.get("/", tags=["root"])
async def root():
    """API root — basic metadata."""
    return {
        "name": "SocialShield API",
        "version": "0.1.0",
        "status": "running",
        "environment": settings.environment,
        "docs": "/docs",
    }
