"""
Pitch throttle.

Verified sellers may send at most `pitch_daily_limit` pitches per UTC
calendar day. The window opens at 00:00:00 UTC (inclusive) and resets at the
next midnight; there is no rolling 24h window.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import structlog

from techhub_server.core.config import get_settings
from techhub_server.core.errors import QuotaExceeded
from techhub_server.services import guard
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import EntityKind, Pitch, User

log = structlog.get_logger()


def start_of_utc_day(moment: datetime) -> datetime:
    """Midnight UTC of the calendar day containing `moment`."""
    utc = moment.astimezone(timezone.utc) if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
    return utc.replace(hour=0, minute=0, second=0, microsecond=0)


async def count_pitches_since(store: EntityStore, seller_id: int, since: datetime) -> int:
    pitches = await store.scan(
        EntityKind.PITCHES,
        lambda p: p.seller_id == seller_id and p.created_at >= since,
    )
    return len(pitches)


async def create_pitch(
    store: EntityStore,
    actor: User,
    buyer_id: int,
    message: str,
    *,
    daily_limit: Optional[int] = None,
) -> Pitch:
    limit = get_settings().pitch_daily_limit if daily_limit is None else daily_limit
    buyer = await store.get(EntityKind.USERS, buyer_id)
    guard.enforce(guard.can_create_pitch(actor, buyer))

    # Count and insert hold the seller's lock so concurrent sends cannot overshoot
    async with store.lock(f"pitch-quota:{actor.id}"):
        window_start = start_of_utc_day(store.now())
        sent_today = await count_pitches_since(store, actor.id, window_start)
        if sent_today >= limit:
            log.info(
                "pitch.quota_exceeded", seller_id=actor.id, sent_today=sent_today, limit=limit
            )
            raise QuotaExceeded(
                f"Daily pitch limit reached ({limit})",
                details={"limit": limit, "window_start": window_start.isoformat()},
            )

        pitch = await store.create(
            EntityKind.PITCHES,
            {"seller_id": actor.id, "buyer_id": buyer.id, "message": message},
        )
    log.info("pitch.created", pitch_id=pitch.id, seller_id=actor.id, buyer_id=buyer.id)
    return pitch


async def list_pitches(
    store: EntityStore,
    actor: User,
    buyer_id: Optional[int] = None,
    seller_id: Optional[int] = None,
) -> list[Pitch]:
    """List pitches. Non-admins without filters get the pitches they are party to."""
    guard.enforce(guard.can_list_for(actor, buyer_id, seller_id))
    own_only = buyer_id is None and seller_id is None and not guard.is_admin(actor)

    def _matches(p: Pitch) -> bool:
        if own_only and not guard.can_view_pitch(actor, p).allowed:
            return False
        if buyer_id is not None and p.buyer_id != buyer_id:
            return False
        if seller_id is not None and p.seller_id != seller_id:
            return False
        return True

    pitches = await store.scan(EntityKind.PITCHES, _matches)
    return sorted(pitches, key=lambda p: p.id)
