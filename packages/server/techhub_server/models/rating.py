"""Rating model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, IntIDMixin


class RatingRow(IntIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "ratings"

    buyer_id: int = Field(foreign_key="users.id", nullable=False)
    seller_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    project_id: Optional[int] = Field(default=None, foreign_key="projects.id")
    request_id: Optional[int] = Field(default=None, foreign_key="requests.id")
    rating_value: int = Field(nullable=False)
    review: Optional[str] = None
