"""
Authorization guard: who may do what to which entity.

Every check is a pure function of the actor and the entities involved and
returns a `Decision`. Nothing here touches the store; services load the
entities, ask the guard, and call `enforce` before mutating anything.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, NamedTuple, Optional

from techhub_server.core.errors import AuthorizationError, InvalidTransition
from techhub_server.store.entities import Pitch, Request, User
from techhub_shared.schemas.common import (
    BUYER_ROLES,
    SELLER_ROLES,
    RequestStatus,
    Role,
    VerificationStatus,
)
from techhub_shared.schemas.requests import (
    RequestParty,
    transition_party,
    validate_transition,
)


class DenyReason(str, Enum):
    NOT_SELLER = "NOT_SELLER"
    SELLER_NOT_VERIFIED = "SELLER_NOT_VERIFIED"
    NOT_BUYER = "NOT_BUYER"
    TARGET_NOT_SELLER = "TARGET_NOT_SELLER"
    SELF_DEALING = "SELF_DEALING"
    NOT_PARTICIPANT = "NOT_PARTICIPANT"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    NOT_REQUEST_SELLER = "NOT_REQUEST_SELLER"
    REQUEST_NOT_ACCEPTED = "REQUEST_NOT_ACCEPTED"
    ENGAGEMENT_NOT_COMPLETED = "ENGAGEMENT_NOT_COMPLETED"
    NOT_ADMIN = "NOT_ADMIN"
    NOT_SELF = "NOT_SELF"
    ADMIN_ROLE_FORBIDDEN = "ADMIN_ROLE_FORBIDDEN"
    ROLE_CHANGE_FORBIDDEN = "ROLE_CHANGE_FORBIDDEN"
    VERIFICATION_ADMIN_ONLY = "VERIFICATION_ADMIN_ONLY"


class Decision(NamedTuple):
    allowed: bool
    reason: Optional[DenyReason] = None
    message: str = ""


ALLOW = Decision(True)


def deny(reason: DenyReason, message: str) -> Decision:
    return Decision(False, reason, message)


def enforce(decision: Decision) -> None:
    """Raise the error matching a denied decision; no-op when allowed."""
    if decision.allowed:
        return
    if decision.reason is DenyReason.INVALID_TRANSITION:
        raise InvalidTransition(decision.message)
    raise AuthorizationError(decision.message, code=decision.reason.value)


def is_admin(actor: User) -> bool:
    return actor.role == Role.ADMIN


def is_verified_seller(user: User) -> bool:
    return user.role in SELLER_ROLES and user.verification_status == VerificationStatus.VERIFIED


# ---------------------------------------------------------------------------
# Listings and pitches
# ---------------------------------------------------------------------------

def can_create_project(actor: User) -> Decision:
    if actor.role not in SELLER_ROLES:
        return deny(DenyReason.NOT_SELLER, "Only sellers can create projects")
    if actor.verification_status != VerificationStatus.VERIFIED:
        return deny(DenyReason.SELLER_NOT_VERIFIED, "Seller must be verified to list projects")
    return ALLOW


def can_create_pitch(actor: User, buyer: User) -> Decision:
    if actor.role not in SELLER_ROLES:
        return deny(DenyReason.NOT_SELLER, "Only sellers can create pitches")
    if actor.verification_status != VerificationStatus.VERIFIED:
        return deny(DenyReason.SELLER_NOT_VERIFIED, "Seller must be verified to pitch buyers")
    if actor.id == buyer.id:
        return deny(DenyReason.SELF_DEALING, "Sellers cannot pitch themselves")
    return ALLOW


def can_view_pitch(actor: User, pitch: Pitch) -> Decision:
    if actor.id in (pitch.buyer_id, pitch.seller_id) or is_admin(actor):
        return ALLOW
    return deny(DenyReason.NOT_PARTICIPANT, "Only the buyer, the seller or an admin can view this pitch")


def can_list_for(actor: User, buyer_id: Optional[int], seller_id: Optional[int]) -> Decision:
    """Non-admins may only filter requests or pitches down to their own records."""
    if is_admin(actor):
        return ALLOW
    for party_id in (buyer_id, seller_id):
        if party_id is not None and party_id != actor.id:
            return deny(DenyReason.NOT_PARTICIPANT, "You can only list your own records")
    return ALLOW


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

def can_create_request(actor: User, seller: User) -> Decision:
    if actor.role not in BUYER_ROLES:
        return deny(DenyReason.NOT_BUYER, "Only buyers can create requests")
    if actor.id == seller.id:
        return deny(DenyReason.SELF_DEALING, "You cannot send a request to yourself")
    if seller.role not in SELLER_ROLES:
        return deny(DenyReason.TARGET_NOT_SELLER, "Requests can only be sent to sellers")
    return ALLOW


def can_view_request(actor: User, request: Request) -> Decision:
    if actor.id in (request.buyer_id, request.seller_id) or is_admin(actor):
        return ALLOW
    return deny(DenyReason.NOT_PARTICIPANT, "Only the buyer, the seller or an admin can view this request")


def can_mutate_request_status(actor: User, request: Request, new_status: RequestStatus) -> Decision:
    party = transition_party(request.status, new_status)
    if party is RequestParty.SELLER and actor.id == request.seller_id:
        return ALLOW
    if party is RequestParty.BUYER and actor.id == request.buyer_id:
        return ALLOW

    valid, message = validate_transition(request.status, new_status)
    if valid:
        message = (
            f"Only the request's {party.value} can move it from "
            f"{request.status.value} to {new_status.value}"
        )
    return deny(DenyReason.INVALID_TRANSITION, message)


def can_create_upload(actor: User, request: Request) -> Decision:
    if actor.id != request.seller_id:
        return deny(DenyReason.NOT_REQUEST_SELLER, "Only the seller can upload files")
    if request.status != RequestStatus.ACCEPTED:
        return deny(DenyReason.REQUEST_NOT_ACCEPTED, "Uploads require an accepted request")
    return ALLOW


def can_rate(actor: User, seller: User, request: Optional[Request] = None) -> Decision:
    if actor.id == seller.id:
        return deny(DenyReason.SELF_DEALING, "You cannot rate yourself")
    if seller.role not in SELLER_ROLES:
        return deny(DenyReason.TARGET_NOT_SELLER, "Only sellers can be rated")
    if request is not None:
        if request.buyer_id != actor.id or request.seller_id != seller.id:
            return deny(DenyReason.NOT_PARTICIPANT, "Only the request's buyer can rate its seller")
        if request.status != RequestStatus.COMPLETED:
            return deny(DenyReason.ENGAGEMENT_NOT_COMPLETED, "Requests can only be rated once completed")
    return ALLOW


# ---------------------------------------------------------------------------
# Users and administration
# ---------------------------------------------------------------------------

def can_register(role: Role) -> Decision:
    if role == Role.ADMIN:
        return deny(DenyReason.ADMIN_ROLE_FORBIDDEN, "The admin role cannot be self-assigned")
    return ALLOW


def can_self_update(actor: User, target_id: int, changes: Mapping[str, Any]) -> Decision:
    if actor.id != target_id:
        return deny(DenyReason.NOT_SELF, "You can only update your own profile")
    if "verification_status" in changes:
        return deny(DenyReason.VERIFICATION_ADMIN_ONLY, "Verification status is set by admins only")
    role = changes.get("role")
    if role is not None:
        if role == Role.ADMIN:
            return deny(DenyReason.ADMIN_ROLE_FORBIDDEN, "The admin role cannot be self-assigned")
        if is_admin(actor):
            return deny(DenyReason.ROLE_CHANGE_FORBIDDEN, "Administrators cannot change their own role")
    return ALLOW


def can_view_totals(actor: User, user_id: int) -> Decision:
    if actor.id == user_id or is_admin(actor):
        return ALLOW
    return deny(DenyReason.NOT_SELF, "You can only view your own totals")


def can_administer(actor: User) -> Decision:
    if is_admin(actor):
        return ALLOW
    return deny(DenyReason.NOT_ADMIN, "Administrator access required")


def can_verify_seller(actor: User, target: User) -> Decision:
    if not is_admin(actor):
        return deny(DenyReason.NOT_ADMIN, "Administrator access required")
    if target.role not in SELLER_ROLES:
        return deny(DenyReason.TARGET_NOT_SELLER, "Only sellers can be verified")
    return ALLOW
