"""
Admin endpoints. Access is role=admin on a normal session; there is no
second credential check.

GET   /api/admin/users                  - All users
PATCH /api/admin/users/{userId}/verify  - Verify a seller
GET   /api/admin/stats                  - Platform overview
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from techhub_server.core.auth import require_admin
from techhub_server.core.config import Settings, get_app_settings
from techhub_server.core.database import get_store
from techhub_server.services import requests as request_service
from techhub_server.services import users as user_service
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import User
from techhub_shared.schemas.requests import PlatformStats
from techhub_shared.schemas.users import UserRead

router = APIRouter()


@router.get("/users", response_model=List[UserRead])
async def list_users(
    admin: User = Depends(require_admin),
    store: EntityStore = Depends(get_store),
):
    return await user_service.list_users(store, admin)


@router.patch("/users/{userId}/verify", response_model=UserRead)
async def verify_seller(
    userId: int,
    admin: User = Depends(require_admin),
    store: EntityStore = Depends(get_store),
):
    return await user_service.verify_seller(store, admin, userId)


@router.get("/stats", response_model=PlatformStats)
async def platform_stats(
    admin: User = Depends(require_admin),
    store: EntityStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    return await request_service.platform_stats(store, admin, percent=settings.commission_percent)
