"""Project model."""

from typing import List, Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, IntIDMixin


class ProjectRow(IntIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "projects"

    seller_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    title: str = Field(nullable=False)
    description: str = Field(nullable=False)
    price_cents: int = Field(nullable=False)
    project_type: str = Field(nullable=False)  # cli | gui | web
    language_tags: List[str] = Field(default_factory=list, sa_type=sa.JSON, nullable=False)
    file_path_ref: Optional[str] = None
    command_inputs: Optional[str] = None
