"""
Shared fixtures: an injectable clock, an in-memory store, a fake Redis and
an HTTPS test client bound to a fresh app per test.
"""

from __future__ import annotations

import os

# Cheap hashes and quiet logs for the whole run; read by get_settings() at import time
os.environ.setdefault("TECHHUB_BCRYPT_ROUNDS", "4")
os.environ.setdefault("TECHHUB_LOG_LEVEL", "warning")
os.environ.setdefault("TECHHUB_LOG_FORMAT", "console")

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from techhub_server.core.auth import CSRF_COOKIE, CSRF_HEADER
from techhub_server.core.config import Settings
from techhub_server.main import create_app
from techhub_server.store.memory import MemoryStore

ADMIN_EMAIL = "admin@techhub.example.com"
ADMIN_PASSWORD = "admin-password-123"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)

    def set(self, moment: datetime) -> None:
        self.current = moment


class FakeRedis:
    """The two Redis commands the revocation list uses, backed by a dict."""

    def __init__(self):
        self.data: dict[str, str] = {}

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.data[key] = value

    async def exists(self, key: str) -> int:
        return 1 if key in self.data else 0


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock: FrozenClock) -> MemoryStore:
    return MemoryStore(clock)


@pytest.fixture(autouse=True)
def fake_redis():
    redis = FakeRedis()
    with patch("techhub_server.core.auth.get_redis", new=AsyncMock(return_value=redis)):
        yield redis


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        admin_username="admin",
    )


@pytest.fixture
def app(settings: Settings, store: MemoryStore):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    # Session cookies are Secure, so talk HTTPS to the test server
    with TestClient(app, base_url="https://testserver") as test_client:
        yield test_client


def _sync_csrf(client: TestClient) -> None:
    token = client.cookies.get(CSRF_COOKIE)
    if token:
        client.headers[CSRF_HEADER] = token


@pytest.fixture
def login(client: TestClient):
    """Log `client` in as the given user and return the user JSON."""

    def _login(username: str, password: str = "password123") -> dict:
        resp = client.post("/api/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        _sync_csrf(client)
        return resp.json()

    return _login


@pytest.fixture
def register(client: TestClient):
    """Register a user (which also logs `client` in as them) and return the user JSON."""

    def _register(username: str, role: str = "buyer", email: str | None = None) -> dict:
        resp = client.post(
            "/api/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": "password123",
                "display_name": username.title(),
                "role": role,
            },
        )
        assert resp.status_code == 201, resp.text
        _sync_csrf(client)
        return resp.json()

    return _register


@pytest.fixture
def login_admin(login):
    def _login_admin() -> dict:
        return login("admin", ADMIN_PASSWORD)

    return _login_admin


@pytest.fixture
def verified_seller(client: TestClient, register, login_admin, login):
    """Register a seller, have the admin verify them, and leave the client logged in as the seller."""

    def _verified_seller(username: str, role: str = "seller") -> dict:
        seller = register(username, role=role)
        login_admin()
        resp = client.patch(f"/api/admin/users/{seller['id']}/verify")
        assert resp.status_code == 200, resp.text
        return login(username)

    return _verified_seller
