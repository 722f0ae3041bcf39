"""
Authentication for the marketplace API.

Supports:
- Username/email + password login (bcrypt hashes)
- JWT session cookie with Redis revocation list
- Double-submit CSRF cookie issued alongside the session
- Actor resolution and admin-only dependency for routers
"""

from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import redis.asyncio as redis
import structlog
from fastapi import Depends, Request, Response

from techhub_server.core.config import Settings, get_app_settings, get_settings
from techhub_server.core.database import get_store
from techhub_server.core.errors import AuthenticationError, NotFoundError
from techhub_server.services import guard
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import EntityKind, User

log = structlog.get_logger()

SESSION_COOKIE = "th_session"
CSRF_COOKIE = "th_csrf"
CSRF_HEADER = "X-CSRF-Token"

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password using bcrypt; ``rounds`` defaults to the configured cost factor."""
    rounds = rounds or get_settings().bcrypt_rounds
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        # Malformed stored hash
        return False


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_jwt(
    user_id: int,
    role: str,
    *,
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> tuple[str, str]:
    """Create a signed JWT. Returns (token, jti)."""
    settings = settings or get_settings()
    jti = str(uuid.uuid4())
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": exp,
        "jti": jti,
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
    return token, jti


def decode_jwt(token: str, settings: Settings | None = None) -> dict:
    """Decode and verify a JWT. Raises jwt.PyJWTError on failure."""
    settings = settings or get_settings()
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


# ---------------------------------------------------------------------------
# JWT Revocation (Redis)
# ---------------------------------------------------------------------------

_redis_pool: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    """Get or create the Redis connection."""
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = redis.from_url(get_settings().redis_url, decode_responses=True)
    return _redis_pool


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None


async def revoke_jwt(jti: str, ttl_seconds: Optional[int] = None) -> None:
    """Add a JWT ID to the revocation list until the token would have expired anyway."""
    ttl = ttl_seconds or get_settings().jwt_expire_minutes * 60
    client = await get_redis()
    await client.setex(f"jwt:revoked:{jti}", ttl, "1")


async def is_jwt_revoked(jti: str) -> bool:
    """Check if a JWT ID has been revoked."""
    client = await get_redis()
    return await client.exists(f"jwt:revoked:{jti}") > 0


# ---------------------------------------------------------------------------
# Cookies
# ---------------------------------------------------------------------------

def generate_csrf_token() -> str:
    """Generate a random CSRF token."""
    return secrets.token_urlsafe(32)


def start_session(response: Response, user: User, settings: Settings | None = None) -> None:
    """Issue a session JWT and CSRF token as cookies."""
    settings = settings or get_settings()
    token, _jti = create_jwt(user.id, user.role.value, settings=settings)
    max_age = settings.jwt_expire_minutes * 60
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=not settings.debug,  # allow non-HTTPS in dev
        samesite="lax",
        path="/",
        max_age=max_age,
    )
    response.set_cookie(
        key=CSRF_COOKIE,
        value=generate_csrf_token(),
        httponly=False,  # JS must read this
        secure=not settings.debug,
        samesite="lax",
        path="/",
        max_age=max_age,
    )


async def end_session(request: Request, response: Response) -> None:
    """Revoke the current session token (if any) and clear the cookies."""
    settings = get_app_settings(request)
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        try:
            payload = decode_jwt(token, settings)
        except jwt.PyJWTError:
            payload = {}  # already invalid, nothing to revoke
        jti = payload.get("jti")
        if jti:
            await revoke_jwt(jti, settings.jwt_expire_minutes * 60)
            log.info("auth.logout", user_id=payload.get("sub"))

    response.delete_cookie(SESSION_COOKIE, path="/")
    response.delete_cookie(CSRF_COOKIE, path="/")


# ---------------------------------------------------------------------------
# Authentication dependencies
# ---------------------------------------------------------------------------

async def get_current_user(
    request: Request,
    store: EntityStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> User:
    """Resolve the actor from the session cookie.

    The user is reloaded from the store on every request so that role and
    verification changes take effect immediately.
    """
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        raise AuthenticationError("Authentication required")

    try:
        payload = decode_jwt(token, settings)
    except jwt.PyJWTError:
        raise AuthenticationError("Invalid or expired session")

    jti = payload.get("jti")
    if jti and await is_jwt_revoked(jti):
        raise AuthenticationError("Session has been revoked")

    try:
        user = await store.get(EntityKind.USERS, int(payload["sub"]))
    except (NotFoundError, KeyError, ValueError):
        raise AuthenticationError("User not found")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Requires the admin role."""
    guard.enforce(guard.can_administer(user))
    return user
