"""Custom job request schemas and the request status state machine."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .common import RequestStatus


class RequestParty(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"


# current status -> {allowed next status: party allowed to make the move}
REQUEST_TRANSITIONS: dict[RequestStatus, dict[RequestStatus, RequestParty]] = {
    RequestStatus.PENDING: {
        RequestStatus.ACCEPTED: RequestParty.SELLER,
        RequestStatus.REJECTED: RequestParty.SELLER,
    },
    RequestStatus.ACCEPTED: {
        RequestStatus.COMPLETED: RequestParty.BUYER,
    },
    RequestStatus.REJECTED: {},
    RequestStatus.COMPLETED: {},
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in REQUEST_TRANSITIONS.items() if not targets
)


class RequestCreate(BaseModel):
    seller_id: int
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    price_cents: int = Field(gt=0)


class RequestStatusUpdate(BaseModel):
    status: RequestStatus


class RequestRead(BaseModel):
    id: int
    buyer_id: int
    seller_id: int
    title: str
    description: str
    price_cents: int
    status: RequestStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class PlatformStats(BaseModel):
    """Admin overview. Revenue figures are in cents over completed requests."""
    total_users: int
    verified_sellers: int
    sellers_awaiting_verification: int
    pending_requests: int
    completed_requests: int
    gross_revenue_cents: int
    commission_revenue_cents: int


def transition_party(
    current: RequestStatus, target: RequestStatus
) -> Optional[RequestParty]:
    """Return the party allowed to move a request from `current` to `target`, if any."""
    return REQUEST_TRANSITIONS[current].get(target)


def validate_transition(current: RequestStatus, target: RequestStatus) -> tuple[bool, str]:
    """Validate a request status transition, ignoring who is asking.

    Rules:
    - pending -> accepted | rejected
    - accepted -> completed
    - rejected and completed are terminal.

    Returns (is_valid, error_message).
    """
    if current == target:
        return False, f"Request is already {current.value}"

    if current in TERMINAL_STATUSES:
        return False, f"Request is {current.value} and can no longer change"

    if transition_party(current, target) is None:
        allowed = ", ".join(s.value for s in REQUEST_TRANSITIONS[current])
        return False, (
            f"Cannot transition from {current.value} to {target.value}. "
            f"Allowed: {allowed}"
        )

    return True, ""
