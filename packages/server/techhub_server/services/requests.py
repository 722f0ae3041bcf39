"""
Request lifecycle manager.

Handles:
- Creation of buyer-to-seller job requests
- Status transitions (pending -> accepted | rejected, accepted -> completed)
- Participant-scoped reads
- Financial rollups (spend, earnings, commission), computed on read
"""

from __future__ import annotations

from typing import Iterable, Optional

import structlog

from techhub_server.core.config import get_settings
from techhub_server.services import guard
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import EntityKind, Request, User
from techhub_shared.schemas.common import SELLER_ROLES, RequestStatus, VerificationStatus
from techhub_shared.schemas.requests import PlatformStats, RequestCreate
from techhub_shared.schemas.users import UserTotals

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


async def create_request(store: EntityStore, actor: User, req: RequestCreate) -> Request:
    seller = await store.get(EntityKind.USERS, req.seller_id)
    guard.enforce(guard.can_create_request(actor, seller))
    request = await store.create(
        EntityKind.REQUESTS,
        {
            **req.model_dump(),
            "buyer_id": actor.id,
            "status": RequestStatus.PENDING,
        },
    )
    log.info(
        "request.created",
        request_id=request.id,
        buyer_id=actor.id,
        seller_id=seller.id,
        price_cents=request.price_cents,
    )
    return request


async def get_request(store: EntityStore, actor: User, request_id: int) -> Request:
    request = await store.get(EntityKind.REQUESTS, request_id)
    guard.enforce(guard.can_view_request(actor, request))
    return request


async def list_requests(
    store: EntityStore,
    actor: User,
    buyer_id: Optional[int] = None,
    seller_id: Optional[int] = None,
) -> list[Request]:
    """List requests. Non-admins without filters get the requests they are party to."""
    guard.enforce(guard.can_list_for(actor, buyer_id, seller_id))
    own_only = buyer_id is None and seller_id is None and not guard.is_admin(actor)

    def _matches(r: Request) -> bool:
        if own_only and actor.id not in (r.buyer_id, r.seller_id):
            return False
        if buyer_id is not None and r.buyer_id != buyer_id:
            return False
        if seller_id is not None and r.seller_id != seller_id:
            return False
        return True

    requests = await store.scan(EntityKind.REQUESTS, _matches)
    return sorted(requests, key=lambda r: r.id)


async def transition_request(
    store: EntityStore, actor: User, request_id: int, new_status: RequestStatus
) -> Request:
    """Move a request to `new_status`, or raise InvalidTransition and write nothing."""
    request = await store.get(EntityKind.REQUESTS, request_id)
    decision = guard.can_mutate_request_status(actor, request, new_status)
    if not decision.allowed:
        log.info(
            "request.transition_denied",
            request_id=request_id,
            actor_id=actor.id,
            current=request.status.value,
            target=new_status.value,
        )
    guard.enforce(decision)

    updated = await store.update(EntityKind.REQUESTS, request_id, {"status": new_status})
    log.info(
        "request.transitioned",
        request_id=request_id,
        actor_id=actor.id,
        from_status=request.status.value,
        to_status=new_status.value,
    )
    return updated


# ---------------------------------------------------------------------------
# Financial rollups
# ---------------------------------------------------------------------------


def commission_cents(amount_cents: int, percent: Optional[int] = None) -> int:
    """Platform commission on an amount, in whole cents, rounded half up.

    This is the only commission formula; every report goes through it.
    """
    rate = get_settings().commission_percent if percent is None else percent
    return (amount_cents * rate + 50) // 100


def _completed_total(requests: Iterable[Request]) -> tuple[int, int]:
    total = 0
    count = 0
    for r in requests:
        if r.status == RequestStatus.COMPLETED:
            total += r.price_cents
            count += 1
    return total, count


async def total_spent(store: EntityStore, buyer_id: int) -> int:
    requests = await store.scan(EntityKind.REQUESTS, lambda r: r.buyer_id == buyer_id)
    return _completed_total(requests)[0]


async def total_earned(store: EntityStore, seller_id: int) -> int:
    requests = await store.scan(EntityKind.REQUESTS, lambda r: r.seller_id == seller_id)
    return _completed_total(requests)[0]


async def user_totals(
    store: EntityStore, actor: User, user_id: int, *, percent: Optional[int] = None
) -> UserTotals:
    guard.enforce(guard.can_view_totals(actor, user_id))
    await store.get(EntityKind.USERS, user_id)

    requests = await store.scan(
        EntityKind.REQUESTS, lambda r: user_id in (r.buyer_id, r.seller_id)
    )
    spent, purchases = _completed_total(r for r in requests if r.buyer_id == user_id)
    earned, sales = _completed_total(r for r in requests if r.seller_id == user_id)
    commission = commission_cents(earned, percent)
    return UserTotals(
        user_id=user_id,
        total_spent_cents=spent,
        total_earned_cents=earned,
        commission_cents=commission,
        net_earnings_cents=earned - commission,
        completed_purchases=purchases,
        completed_sales=sales,
    )


async def platform_stats(
    store: EntityStore, actor: User, *, percent: Optional[int] = None
) -> PlatformStats:
    guard.enforce(guard.can_administer(actor))

    users = await store.scan(EntityKind.USERS)
    requests = await store.scan(EntityKind.REQUESTS)
    sellers = [u for u in users if u.role in SELLER_ROLES]
    gross, completed = _completed_total(requests)
    return PlatformStats(
        total_users=len(users),
        verified_sellers=sum(1 for u in sellers if guard.is_verified_seller(u)),
        sellers_awaiting_verification=sum(
            1 for u in sellers if u.verification_status != VerificationStatus.VERIFIED
        ),
        pending_requests=sum(1 for r in requests if r.status == RequestStatus.PENDING),
        completed_requests=completed,
        gross_revenue_cents=gross,
        commission_revenue_cents=commission_cents(gross, percent),
    )
