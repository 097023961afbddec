"""Startup and shutdown for the FastAPI app.

Startup: logging, tracing, then table creation. Shutdown runs in reverse:
spans are flushed before the engine pool is closed.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.persistence import database
from app.shared.telemetry import (
    configure_tracing,
    instrument_app,
    setup_logging,
    shutdown_tracing,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging(debug=settings.debug)

    if configure_tracing(settings) is not None:
        instrument_app(app)

    if settings.create_schema_on_startup:
        await database.create_schema()
        logger.info("Schema ready on %s", database.engine.url.render_as_string(hide_password=True))

    logger.info("%s %s started", settings.app_name, settings.app_version)
    try:
        yield
    finally:
        shutdown_tracing()
        if database.engine is not None:
            await database.engine.dispose()
            logger.info("Database engine disposed")
