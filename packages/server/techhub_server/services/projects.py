"""
Project listings. Only verified sellers can list; listings are immutable.
"""

from __future__ import annotations

from typing import Optional

import structlog

from techhub_server.services import guard
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import EntityKind, Project, User
from techhub_shared.schemas.projects import ProjectCreate

log = structlog.get_logger()


async def create_project(store: EntityStore, actor: User, req: ProjectCreate) -> Project:
    guard.enforce(guard.can_create_project(actor))
    project = await store.create(
        EntityKind.PROJECTS, {**req.model_dump(), "seller_id": actor.id}
    )
    log.info(
        "project.created",
        project_id=project.id,
        seller_id=actor.id,
        price_cents=project.price_cents,
    )
    return project


async def get_project(store: EntityStore, project_id: int) -> Project:
    return await store.get(EntityKind.PROJECTS, project_id)


async def list_projects(store: EntityStore, seller_id: Optional[int] = None) -> list[Project]:
    projects = await store.scan(
        EntityKind.PROJECTS,
        None if seller_id is None else (lambda p: p.seller_id == seller_id),
    )
    return sorted(projects, key=lambda p: p.id)
