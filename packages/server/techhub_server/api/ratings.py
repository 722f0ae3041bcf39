"""
Rating endpoints.

POST /api/ratings              - Rate a seller
GET  /api/ratings/{sellerId}   - A seller's ratings (public)
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from techhub_server.core.auth import get_current_user
from techhub_server.core.database import get_store
from techhub_server.services import ratings as rating_service
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import User
from techhub_shared.schemas.ratings import RatingCreate, RatingRead

router = APIRouter()


@router.post("", response_model=RatingRead, status_code=201)
async def create_rating(
    body: RatingCreate,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return await rating_service.create_rating(store, user, body)


@router.get("/{sellerId}", response_model=List[RatingRead])
async def list_ratings(sellerId: int, store: EntityStore = Depends(get_store)):
    return await rating_service.list_ratings_for_seller(store, sellerId)
