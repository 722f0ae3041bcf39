"""
Entity store construction and the FastAPI dependency that exposes it.
"""

from typing import Optional

import structlog
from fastapi import Request

from techhub_server.core.config import Settings
from techhub_server.store.base import Clock, EntityStore
from techhub_server.store.memory import MemoryStore
from techhub_server.store.sql import SQLStore

log = structlog.get_logger()


async def create_store(settings: Settings, clock: Optional[Clock] = None) -> EntityStore:
    """Build the configured store backend, creating tables for the SQL backend."""
    if settings.store_backend == "sql":
        store = SQLStore(settings.database_url, clock, echo=settings.debug)
        await store.init()
        log.info("store.ready", backend="sql")
        return store
    log.info("store.ready", backend="memory")
    return MemoryStore(clock)


def get_store(request: Request) -> EntityStore:
    """FastAPI dependency for the app-wide entity store."""
    return request.app.state.store
