"""
Work deliveries against accepted requests.
"""

from __future__ import annotations

import structlog

from techhub_server.services import guard
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import EntityKind, Upload, User
from techhub_shared.schemas.common import UploadStatus
from techhub_shared.schemas.uploads import UploadCreate

log = structlog.get_logger()


async def create_upload(store: EntityStore, actor: User, req: UploadCreate) -> Upload:
    request = await store.get(EntityKind.REQUESTS, req.request_id)
    decision = guard.can_create_upload(actor, request)
    if not decision.allowed:
        log.info(
            "upload.denied",
            request_id=request.id,
            actor_id=actor.id,
            reason=decision.reason.value,
        )
    guard.enforce(decision)

    upload = await store.create(
        EntityKind.UPLOADS,
        {
            **req.model_dump(),
            "seller_id": request.seller_id,
            "buyer_id": request.buyer_id,
            "status": UploadStatus.PENDING,
        },
    )
    log.info("upload.created", upload_id=upload.id, request_id=request.id)
    return upload


async def list_uploads(store: EntityStore, actor: User, request_id: int) -> list[Upload]:
    request = await store.get(EntityKind.REQUESTS, request_id)
    guard.enforce(guard.can_view_request(actor, request))
    uploads = await store.scan(EntityKind.UPLOADS, lambda u: u.request_id == request_id)
    return sorted(uploads, key=lambda u: u.id)
