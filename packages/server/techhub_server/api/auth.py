"""
Authentication endpoints.

POST /api/register     - Create an account and start a session
POST /api/login        - Username or email + password login
POST /api/logout       - Revoke the session and clear cookies
GET  /api/user         - The authenticated user
GET  /api/auth/github  - GitHub authorization URL (code exchange is external)
"""

from __future__ import annotations

from urllib.parse import urlencode

import structlog
from fastapi import APIRouter, Depends, Request, Response

from techhub_server.core.auth import end_session, get_current_user, start_session
from techhub_server.core.config import Settings, get_app_settings
from techhub_server.core.database import get_store
from techhub_server.core.errors import NotFoundError
from techhub_server.services import users as user_service
from techhub_server.store.base import EntityStore
from techhub_server.store.entities import User
from techhub_shared.schemas.users import LoginRequest, RegisterRequest, UserRead

log = structlog.get_logger()
router = APIRouter()


@router.post("/register", response_model=UserRead, status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    store: EntityStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Register with username/email/password. The admin role is refused."""
    user = await user_service.register_user(store, body, bcrypt_rounds=settings.bcrypt_rounds)
    start_session(response, user, settings)
    return user


@router.post("/login", response_model=UserRead)
async def login(
    body: LoginRequest,
    response: Response,
    store: EntityStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Authenticate and receive a session cookie."""
    user = await user_service.authenticate(store, body.username, body.password)
    start_session(response, user, settings)
    return user


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    user: User = Depends(get_current_user),
):
    """Invalidate the current session."""
    await end_session(request, response)
    return {"message": "Logged out"}


@router.get("/user", response_model=UserRead)
async def current_user(user: User = Depends(get_current_user)):
    return user


@router.get("/auth/github")
async def github_login(settings: Settings = Depends(get_app_settings)):
    """
    Build the GitHub authorization URL.

    The callback's code exchange belongs to the OAuth provider integration;
    it hands the resulting profile to `provision_oauth_user`.
    """
    if not settings.github_client_id:
        raise NotFoundError("GitHub login is not configured")

    query = urlencode(
        {
            "client_id": settings.github_client_id,
            "redirect_uri": settings.github_callback_url,
            "scope": "user:email",
        }
    )
    return {
        "provider": "github",
        "authorization_url": f"https://github.com/login/oauth/authorize?{query}",
    }
