"""Shaker API — FastAPI application factory and entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ShakerError → structured JSON responses
    - app.state.settings and app.state.db_manager are set before any request
    - A manager created by the lifespan is disposed by it; an injected one is not

Design Decisions:
    - Factory over module singleton: CLI and tests build apps around their own
      DatabaseSessionManager
    - Schema is brought up to date by the CLI before the app starts, never here
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from shaker.api.error_handlers import register_error_handlers
from shaker.api.routes import handshakes, health, users
from shaker.config import Settings, get_settings
from shaker.infrastructure.database import DatabaseSessionManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    owned = app.state.db_manager is None
    if owned:
        app.state.db_manager = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
    if settings.token is None:
        logger.warning(
            "No token provided in configuration - requests will not be "
            "required to provide a token to authenticate",
        )
    logger.info("Shaker API started")
    yield
    logger.info("Shaker API shutting down")
    if owned:
        await app.state.db_manager.dispose()
        app.state.db_manager = None


def create_app(
    settings: Settings | None = None,
    db_manager: DatabaseSessionManager | None = None,
) -> FastAPI:
    """Build the FastAPI app around the given settings and store."""
    app = FastAPI(title="Shaker API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings or get_settings()
    app.state.db_manager = db_manager

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(handshakes.router)

    register_error_handlers(app)
    return app
