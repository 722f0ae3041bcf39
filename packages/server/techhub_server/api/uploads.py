"""
Delivery upload endpoints.

POST /api/uploads               - Deliver a file for an accepted request (its seller)
GET  /api/uploads/{requestId}   - Deliveries for a request (participants / admin)
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from techhub_server.core.auth import get_current_user
from techhub_server.core.database import get_store
from techhub_server.services import uploads as upload_service
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import User
from techhub_shared.schemas.uploads import UploadCreate, UploadRead

router = APIRouter()


@router.post("", response_model=UploadRead, status_code=201)
async def create_upload(
    body: UploadCreate,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return await upload_service.create_upload(store, user, body)


@router.get("/{requestId}", response_model=List[UploadRead])
async def list_uploads(
    requestId: int,
    user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return await upload_service.list_uploads(store, user, requestId)
