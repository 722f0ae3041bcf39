"""
User service: registration, login, OAuth provisioning, profiles, seller
verification and admin seeding.
"""

from __future__ import annotations

import re
import secrets
from typing import Optional

import structlog

from techhub_server.core.auth import hash_password, verify_password
from techhub_server.core.config import Settings
from techhub_server.core.errors import AuthenticationError, ConflictError, ValidationError
from techhub_server.services import guard
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import EntityKind, User
from techhub_shared.schemas.common import SELLER_ROLES, Role, VerificationStatus
from techhub_shared.schemas.users import (
    OAuthProfile,
    RegisterRequest,
    UserUpdateRequest,
)

log = structlog.get_logger()

# Fields that may be cleared with an explicit null
_NULLABLE_PROFILE_FIELDS = frozenset({"location", "avatar_url"})


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

async def find_by_username(store: EntityStore, username: str) -> Optional[User]:
    wanted = username.lower()
    matches = await store.scan(EntityKind.USERS, lambda u: u.username.lower() == wanted)
    return matches[0] if matches else None


async def find_by_email(store: EntityStore, email: str) -> Optional[User]:
    wanted = email.lower()
    matches = await store.scan(EntityKind.USERS, lambda u: u.email.lower() == wanted)
    return matches[0] if matches else None


async def get_user(store: EntityStore, user_id: int) -> User:
    return await store.get(EntityKind.USERS, user_id)


async def list_users(store: EntityStore, actor: User) -> list[User]:
    """All users, admin only."""
    guard.enforce(guard.can_administer(actor))
    users = await store.scan(EntityKind.USERS)
    return sorted(users, key=lambda u: u.id)


async def list_sellers(
    store: EntityStore, status: Optional[VerificationStatus] = None
) -> list[User]:
    """Users with a seller-capable role, optionally filtered by status."""
    sellers = await store.scan(
        EntityKind.USERS,
        lambda u: u.role in SELLER_ROLES and (status is None or u.verification_status == status),
    )
    return sorted(sellers, key=lambda u: u.id)


# ---------------------------------------------------------------------------
# Registration & login
# ---------------------------------------------------------------------------

async def _ensure_unique(
    store: EntityStore,
    *,
    username: Optional[str] = None,
    email: Optional[str] = None,
    exclude_id: Optional[int] = None,
) -> None:
    if username is not None:
        existing = await find_by_username(store, username)
        if existing and existing.id != exclude_id:
            raise ConflictError("Username already exists", details={"field": "username"})
    if email is not None:
        existing = await find_by_email(store, email)
        if existing and existing.id != exclude_id:
            raise ConflictError("Email already exists", details={"field": "email"})


async def register_user(
    store: EntityStore, req: RegisterRequest, *, bcrypt_rounds: Optional[int] = None
) -> User:
    """Create a local account. The admin role can never be self-assigned."""
    guard.enforce(guard.can_register(req.role))
    await _ensure_unique(store, username=req.username, email=req.email)

    user = await store.create(
        EntityKind.USERS,
        {
            "username": req.username,
            "email": req.email,
            "password_hash": hash_password(req.password, bcrypt_rounds),
            "display_name": req.display_name,
            "role": req.role,
            "verification_status": VerificationStatus.ACTIVE,
            "location": req.location,
            "avatar_url": req.avatar_url,
        },
    )
    log.info("user.registered", user_id=user.id, role=user.role.value)
    return user


async def authenticate(store: EntityStore, identifier: str, password: str) -> User:
    """Check credentials. `identifier` is an email if it contains '@', else a username."""
    if "@" in identifier:
        user = await find_by_email(store, identifier)
    else:
        user = await find_by_username(store, identifier)

    if user is None or not verify_password(password, user.password_hash):
        log.warning("auth.login_failure", identifier=identifier)
        raise AuthenticationError("Invalid username or password")

    log.info("auth.login_success", user_id=user.id)
    return user


def _base_username(profile: OAuthProfile) -> str:
    raw = (
        profile.username
        or (profile.display_name or "").replace(" ", "")
        or (profile.email or "").split("@")[0]
    )
    cleaned = re.sub(r"[^A-Za-z0-9_.-]", "", raw)
    return cleaned or "user"


async def provision_oauth_user(
    store: EntityStore, profile: OAuthProfile, *, bcrypt_rounds: Optional[int] = None
) -> User:
    """Find or create the account for an OAuth identity.

    This is the hook for the external GitHub integration: once it has
    exchanged the callback code and fetched the verified profile, it calls
    this function and starts a session for the returned user. No route
    accepts a profile directly, since a client-supplied email would let
    anyone sign in as an existing account.

    New accounts are always buyers with a random password; switching to a
    seller role later leaves them unverified until an admin verifies them.
    """
    if not profile.email:
        raise ValidationError(
            "OAuth profile has no email address", details={"field": "email"}
        )

    existing = await find_by_email(store, profile.email)
    if existing is not None:
        log.info("auth.oauth_login", user_id=existing.id, provider=profile.provider)
        return existing

    base = _base_username(profile)
    username = base
    suffix = 1
    while await find_by_username(store, username) is not None:
        suffix += 1
        username = f"{base}{suffix}"

    user = await store.create(
        EntityKind.USERS,
        {
            "username": username,
            "email": profile.email,
            "password_hash": hash_password(secrets.token_hex(16), bcrypt_rounds),
            "display_name": profile.display_name or username,
            "role": Role.BUYER,
            "verification_status": VerificationStatus.ACTIVE,
            "avatar_url": profile.avatar_url,
        },
    )
    log.info("user.provisioned", user_id=user.id, provider=profile.provider)
    return user


# ---------------------------------------------------------------------------
# Profile & verification
# ---------------------------------------------------------------------------

async def update_profile(
    store: EntityStore, actor: User, user_id: int, req: UserUpdateRequest
) -> User:
    """Self-service profile update; role toggles among buyer/seller/both only."""
    changes = req.model_dump(exclude_unset=True)
    guard.enforce(guard.can_self_update(actor, user_id, changes))

    changes = {
        key: value
        for key, value in changes.items()
        if value is not None or key in _NULLABLE_PROFILE_FIELDS
    }
    if "email" in changes:
        await _ensure_unique(store, email=changes["email"], exclude_id=user_id)

    user = await store.update(EntityKind.USERS, user_id, changes)
    log.info("user.updated", user_id=user_id, fields=sorted(changes))
    return user


async def verify_seller(store: EntityStore, actor: User, target_id: int) -> User:
    guard.enforce(guard.can_administer(actor))
    target = await store.get(EntityKind.USERS, target_id)
    guard.enforce(guard.can_verify_seller(actor, target))
    user = await store.update(
        EntityKind.USERS, target_id, {"verification_status": VerificationStatus.VERIFIED}
    )
    log.info("seller.verified", user_id=target_id, admin_id=actor.id)
    return user


async def seed_admin(store: EntityStore, settings: Settings) -> Optional[User]:
    """Create the configured administrator if it does not exist yet."""
    if not settings.admin_email or not settings.admin_password:
        return None

    existing = await find_by_email(store, settings.admin_email)
    if existing is not None:
        if existing.role != Role.ADMIN:
            log.warning("admin.seed_conflict", user_id=existing.id)
        return existing

    username = settings.admin_username
    if await find_by_username(store, username) is not None:
        username = f"{username}-{secrets.token_hex(3)}"

    admin = await store.create(
        EntityKind.USERS,
        {
            "username": username,
            "email": settings.admin_email,
            "password_hash": hash_password(settings.admin_password, settings.bcrypt_rounds),
            "display_name": "Administrator",
            "role": Role.ADMIN,
            "verification_status": VerificationStatus.ACTIVE,
        },
    )
    log.info("admin.seeded", user_id=admin.id)
    return admin
