"""
User profile endpoints.

GET   /api/users/{userId}         - Public profile (session required)
PATCH /api/users/{userId}         - Self-service profile update
GET   /api/users/{userId}/totals  - Spend/earnings rollup (self or admin)
GET   /api/sellers                - Seller directory, optional ?status=
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends

from techhub_server.core.auth import get_current_user
from techhub_server.core.config import Settings, get_app_settings
from techhub_server.core.database import get_store
from techhub_server.services import requests as request_service
from techhub_server.services import users as user_service
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import User
from techhub_shared.schemas.common import VerificationStatus
from techhub_shared.schemas.users import UserRead, UserTotals, UserUpdateRequest

router = APIRouter()
sellers_router = APIRouter()


@router.get("/{userId}", response_model=UserRead)
async def get_user(
    userId: int,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return await user_service.get_user(store, userId)


@router.patch("/{userId}", response_model=UserRead)
async def update_user(
    userId: int,
    body: UserUpdateRequest,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Update your own profile. Role may toggle among buyer/seller/both."""
    return await user_service.update_profile(store, user, userId, body)


@router.get("/{userId}/totals", response_model=UserTotals)
async def get_user_totals(
    userId: int,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Completed spend and earnings with platform commission, in cents."""
    return await request_service.user_totals(store, user, userId, percent=settings.commission_percent)


@sellers_router.get("", response_model=List[UserRead])
async def list_sellers(
    status: Optional[VerificationStatus] = None,
    store: EntityStore = Depends(get_store),
):
    return await user_service.list_sellers(store, status)
