"""
Ratings: one review per buyer per completed engagement.
"""

from __future__ import annotations

from typing import Optional

import structlog

from techhub_server.core.errors import ConflictError, ValidationError
from techhub_server.services import guard
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import EntityKind, Rating, Request, User
from techhub_shared.schemas.ratings import RatingCreate

log = structlog.get_logger()


async def create_rating(store: EntityStore, actor: User, req: RatingCreate) -> Rating:
    seller = await store.get(EntityKind.USERS, req.seller_id)

    request: Optional[Request] = None
    if req.request_id is not None:
        request = await store.get(EntityKind.REQUESTS, req.request_id)
    guard.enforce(guard.can_rate(actor, seller, request))

    if req.project_id is not None:
        project = await store.get(EntityKind.PROJECTS, req.project_id)
        if project.seller_id != seller.id:
            raise ValidationError(
                "Project does not belong to this seller",
                details={"field": "project_id"},
            )

    def _duplicate(r: Rating) -> bool:
        if r.buyer_id != actor.id:
            return False
        if req.request_id is not None and r.request_id == req.request_id:
            return True
        return req.project_id is not None and r.project_id == req.project_id

    if (req.request_id is not None or req.project_id is not None) and await store.scan(
        EntityKind.RATINGS, _duplicate
    ):
        raise ConflictError("You have already rated this engagement")

    rating = await store.create(
        EntityKind.RATINGS, {**req.model_dump(), "buyer_id": actor.id}
    )
    log.info(
        "rating.created",
        rating_id=rating.id,
        seller_id=seller.id,
        buyer_id=actor.id,
        value=rating.rating_value,
    )
    return rating


async def list_ratings_for_seller(store: EntityStore, seller_id: int) -> list[Rating]:
    ratings = await store.scan(EntityKind.RATINGS, lambda r: r.seller_id == seller_id)
    return sorted(ratings, key=lambda r: r.id)
