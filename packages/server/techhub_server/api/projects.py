"""
Project listing endpoints.

POST /api/projects             - List a project (verified sellers)
GET  /api/projects?sellerId=   - Browse listings
GET  /api/projects/{projectId} - Single listing
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends

from techhub_server.core.auth import get_current_user
from techhub_server.core.database import get_store
from techhub_server.services import projects as project_service
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import User
from techhub_shared.schemas.projects import ProjectCreate, ProjectRead

router = APIRouter()


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(
    body: ProjectCreate,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return await project_service.create_project(store, user, body)


@router.get("", response_model=List[ProjectRead])
async def list_projects(
    sellerId: Optional[int] = None,
    store: EntityStore = Depends(get_store),
):
    return await project_service.list_projects(store, sellerId)


@router.get("/{projectId}", response_model=ProjectRead)
async def get_project(projectId: int, store: EntityStore = Depends(get_store)):
    return await project_service.get_project(store, projectId)
