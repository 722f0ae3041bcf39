"""
Application configuration loaded from environment variables.
"""

from functools import lru_cache
from typing import Literal, Optional

from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """TechHub server configuration."""

    model_config = SettingsConfigDict(env_prefix="TECHHUB_", env_file=".env", extra="ignore")

    environment: Literal["development", "production", "test"] = "development"

    # Storage
    store_backend: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite+aiosqlite:///./techhub.db"

    # Redis (session revocation)
    redis_url: str = "redis://localhost:6379/0"

    # Security
    secret_key: str = "CHANGE_ME_IN_PRODUCTION"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7
    bcrypt_rounds: int = 12

    # OAuth (GitHub)
    github_client_id: str = ""
    github_client_secret: str = ""
    github_callback_url: str = "http://localhost:8000/api/auth/github/callback"

    # Seeded administrator
    admin_email: Optional[str] = None
    admin_username: str = "admin"
    admin_password: Optional[str] = None

    # Marketplace rules
    pitch_daily_limit: int = 5
    commission_percent: int = 10

    # Logging
    log_level: str = "info"
    log_format: Literal["json", "console"] = "json"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_app_settings(request: Request) -> Settings:
    """FastAPI dependency: the settings the running app was created with.

    Apps built without ``create_app`` fall back to the process-wide settings.
    """
    return getattr(request.app.state, "settings", None) or get_settings()
