"""Shelter Adoption API — application factory and process-level wiring.

Invariants:
    - Routers registered explicitly, in one place (ADR: ExMA no auto-discovery)
    - Every error leaves through api/error_handlers in the one envelope
    - The database manager exists only between lifespan startup and shutdown

Design Decisions:
    - create_app() factory; the module-level `app` is what uvicorn and tests import
    - Lifespan over @app.on_event: startup and shutdown live in one function
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import adoptions, animals, health
from app.config import Settings, get_settings
from app.infrastructure import database
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(
        f"Adoption API ready (timeout {settings.lifecycle_timeout_seconds}s, "
        f"{settings.lifecycle_max_retries} retries)",
    )
    try:
        yield
    finally:
        await manager.engine.dispose()
        database.db_manager = None
        logger.info("Adoption API stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    application = FastAPI(
        title="Shelter Adoption API",
        version=health.SERVICE_VERSION,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    for module in (health, animals, adoptions):
        application.include_router(module.router)
    register_error_handlers(application)
    return application


app = create_app()
