"""Shared enums, role sets and the error envelope."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Role(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    BOTH = "both"
    ADMIN = "admin"


class VerificationStatus(str, Enum):
    ACTIVE = "active"
    BUSY = "busy"
    UNAVAILABLE = "unavailable"
    VERIFIED = "verified"


class ProjectType(str, Enum):
    CLI = "cli"
    GUI = "gui"
    WEB = "web"


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


class UploadStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"


SELLER_ROLES = frozenset({Role.SELLER, Role.BOTH})
BUYER_ROLES = frozenset({Role.BUYER, Role.BOTH})

# Roles a user may pick for themselves
SELF_SERVICE_ROLES = frozenset({Role.BUYER, Role.SELLER, Role.BOTH})

# $1.00
MIN_PROJECT_PRICE_CENTS = 100


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------

class ErrorBody(BaseModel):
    code: str
    message: str
    status: int
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    error: ErrorBody
