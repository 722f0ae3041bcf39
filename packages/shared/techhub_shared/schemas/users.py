"""User, registration and profile schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from .common import Role, VerificationStatus


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class RegisterRequest(BaseModel):
    """Self-registration. `role` is accepted so an admin request can be refused explicitly."""
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    display_name: str = Field(min_length=1, max_length=200)
    role: Role = Role.BUYER
    location: Optional[str] = Field(default=None, max_length=200)
    avatar_url: Optional[str] = None


class LoginRequest(BaseModel):
    """Login by username or email (anything containing '@' is treated as an email)."""
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserUpdateRequest(BaseModel):
    """Self-service profile update. Only fields that are set are applied."""
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    location: Optional[str] = Field(default=None, max_length=200)
    avatar_url: Optional[str] = None
    status_message: Optional[str] = Field(default=None, max_length=500)
    role: Optional[Role] = None
    verification_status: Optional[VerificationStatus] = None


class OAuthProfile(BaseModel):
    """Identity handed over by an OAuth provider after the code exchange."""
    provider: str
    email: Optional[EmailStr] = None
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserRead(BaseModel):
    """Public view of a user. Never carries the password hash."""
    id: int
    username: str
    email: str
    display_name: str
    role: Role
    verification_status: VerificationStatus
    status_message: str = ""
    avatar_url: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserTotals(BaseModel):
    """Financial rollup for one user, all amounts in cents."""
    user_id: int
    total_spent_cents: int
    total_earned_cents: int
    commission_cents: int
    net_earnings_cents: int
    completed_purchases: int
    completed_sales: int
