"""
Custom job request endpoints.

POST  /api/requests                      - Create a request (buyers)
GET   /api/requests?buyerId=&sellerId=   - List (participants / admin)
GET   /api/requests/{requestId}          - Single request (participants / admin)
PATCH /api/requests/{requestId}          - Status transition
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends

from techhub_server.core.auth import get_current_user
from techhub_server.core.database import get_store
from techhub_server.services import requests as request_service
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import User
from techhub_shared.schemas.requests import RequestCreate, RequestRead, RequestStatusUpdate

router = APIRouter()


@router.post("", response_model=RequestRead, status_code=201)
async def create_request(
    body: RequestCreate,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return await request_service.create_request(store, user, body)


@router.get("", response_model=List[RequestRead])
async def list_requests(
    buyerId: Optional[int] = None,
    sellerId: Optional[int] = None,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return await request_service.list_requests(store, user, buyerId, sellerId)


@router.get("/{requestId}", response_model=RequestRead)
async def get_request(
    requestId: int,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return await request_service.get_request(store, user, requestId)


@router.patch("/{requestId}", response_model=RequestRead)
async def transition_request(
    requestId: int,
    body: RequestStatusUpdate,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Seller accepts/rejects a pending request; buyer completes an accepted one."""
    return await request_service.transition_request(store, user, requestId, body.status)
