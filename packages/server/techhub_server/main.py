"""
TechHub Marketplace API Server

Entry point for the FastAPI application.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from techhub_server.api import router as api_router
from techhub_server.core.auth import close_redis
from techhub_server.core.config import Settings, get_settings
from techhub_server.core.database import create_store
from techhub_server.core.errors import register_error_handlers
from techhub_server.core.logs import configure_logging
from techhub_server.core.middleware import (
    CSRFMiddleware,
    RequestContextMiddleware,
    SecurityHeadersMiddleware,
)
from techhub_server.services.users import seed_admin
from techhub_server.store.base import Clock, EntityStore

log = structlog.get_logger()


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[EntityStore] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    A pre-built `store` is used as-is and left open on shutdown; otherwise the
    configured backend is created at startup and closed at shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_store = app.state.store is None
        if owns_store:
            app.state.store = await create_store(settings, clock)
        await seed_admin(app.state.store, settings)
        log.info("TechHub starting", environment=settings.environment, backend=settings.store_backend)
        yield
        log.info("TechHub shutting down")
        if owns_store:
            await app.state.store.close()
            app.state.store = None
        await close_redis()

    app = FastAPI(
        title="TechHub Marketplace",
        description="Marketplace for freelance software projects and custom jobs.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    # Middleware (last added is outermost)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(CSRFMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["Content-Type", "X-CSRF-Token", "X-Request-ID"],
    )
    app.add_middleware(RequestContextMiddleware)

    register_error_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Liveness probe."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check():
        """Readiness probe: the entity store has been created."""
        if app.state.store is None:
            return {"status": "starting"}
        return {"status": "ready"}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "techhub_server.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        reload=settings.debug,
    )
