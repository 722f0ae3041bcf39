"""
Stored entity types.

These are the records owned by the entity store. They differ from the wire
schemas in `techhub_shared` only where the store keeps data that is never
sent to clients (the user's password hash).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from techhub_shared.schemas.common import (
    ProjectType,
    RequestStatus,
    Role,
    UploadStatus,
    VerificationStatus,
)


class EntityKind(str, Enum):
    USERS = "users"
    PROJECTS = "projects"
    REQUESTS = "requests"
    PITCHES = "pitches"
    RATINGS = "ratings"
    UPLOADS = "uploads"


class Entity(BaseModel):
    id: int
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class User(Entity):
    username: str
    email: str
    password_hash: str
    display_name: str
    role: Role = Role.BUYER
    verification_status: VerificationStatus = VerificationStatus.ACTIVE
    status_message: str = ""
    avatar_url: Optional[str] = None
    location: Optional[str] = None


class Project(Entity):
    seller_id: int
    title: str
    description: str
    price_cents: int
    project_type: ProjectType
    language_tags: List[str] = Field(default_factory=list)
    file_path_ref: Optional[str] = None
    command_inputs: Optional[str] = None


class Request(Entity):
    buyer_id: int
    seller_id: int
    title: str
    description: str
    price_cents: int
    status: RequestStatus = RequestStatus.PENDING


class Pitch(Entity):
    seller_id: int
    buyer_id: int
    message: str


class Rating(Entity):
    buyer_id: int
    seller_id: int
    project_id: Optional[int] = None
    request_id: Optional[int] = None
    rating_value: int
    review: Optional[str] = None


class Upload(Entity):
    request_id: int
    seller_id: int
    buyer_id: int
    file_name: str
    file_path_ref: str
    status: UploadStatus = UploadStatus.PENDING


ENTITY_TYPES: dict[EntityKind, type[Entity]] = {
    EntityKind.USERS: User,
    EntityKind.PROJECTS: Project,
    EntityKind.REQUESTS: Request,
    EntityKind.PITCHES: Pitch,
    EntityKind.RATINGS: Rating,
    EntityKind.UPLOADS: Upload,
}

ENTITY_LABELS: dict[EntityKind, str] = {
    EntityKind.USERS: "User",
    EntityKind.PROJECTS: "Project",
    EntityKind.REQUESTS: "Request",
    EntityKind.PITCHES: "Pitch",
    EntityKind.RATINGS: "Rating",
    EntityKind.UPLOADS: "Upload",
}
