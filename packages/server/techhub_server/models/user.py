"""User model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, IntIDMixin


class UserRow(IntIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "users"

    username: str = Field(nullable=False, index=True)
    email: str = Field(nullable=False, index=True)
    password_hash: str = Field(nullable=False)
    display_name: str = Field(nullable=False)
    role: str = Field(default="buyer", nullable=False)  # buyer | seller | both | admin
    verification_status: str = Field(default="active", nullable=False)  # active | busy | unavailable | verified
    status_message: str = Field(default="", nullable=False)
    avatar_url: Optional[str] = None
    location: Optional[str] = None
