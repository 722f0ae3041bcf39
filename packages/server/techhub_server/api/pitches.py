"""
Pitch endpoints.

POST /api/pitches                     - Pitch a buyer (verified sellers, daily quota)
GET  /api/pitches?buyerId=&sellerId=  - List (participants / admin)
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends

from techhub_server.core.auth import get_current_user
from techhub_server.core.config import Settings, get_app_settings
from techhub_server.core.database import get_store
from techhub_server.services import pitches as pitch_service
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import User
from techhub_shared.schemas.pitches import PitchCreate, PitchRead

router = APIRouter()


@router.post("", response_model=PitchRead, status_code=201)
async def create_pitch(
    body: PitchCreate,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    return await pitch_service.create_pitch(
        store, user, body.buyer_id, body.message, daily_limit=settings.pitch_daily_limit
    )


@router.get("", response_model=List[PitchRead])
async def list_pitches(
    buyerId: Optional[int] = None,
    sellerId: Optional[int] = None,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return await pitch_service.list_pitches(store, user, buyerId, sellerId)
