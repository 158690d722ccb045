"""Chargebacks API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ChargebackError → structured JSON responses
    - CORS configured from settings (not hardcoded) and exposes X-Idempotency-Write
    - The storage engine is opened once on startup and closed on every shutdown path

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Engine and store live on app.state and reach routes through Depends(get_store)
      (ADR: explicitly owned resource, no module-level singleton)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chargebacks import __version__
from chargebacks.api.error_handlers import register_error_handlers
from chargebacks.api.routes import chargebacks, health
from chargebacks.api.routes.chargebacks import WRITE_HEADER
from chargebacks.config import get_settings
from chargebacks.infrastructure.observability import setup_logging
from chargebacks.infrastructure.storage_engine import StorageEngine
from chargebacks.services.chargeback_store import ChargebackStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    engine = StorageEngine.open(
        settings.db_path, lock_timeout=settings.lock_timeout_seconds,
    )
    try:
        app.state.store = ChargebackStore(engine)
        logger.info(f"Chargebacks API started (db: {settings.db_path})")
        yield
    finally:
        logger.info("Chargebacks API shutting down")
        app.state.store = None
        engine.close()


app = FastAPI(
    title="Chargebacks API", version=__version__, lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
    expose_headers=[WRITE_HEADER],
)

register_error_handlers(app)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(chargebacks.router)
