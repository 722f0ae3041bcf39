"""Base mixins for SQLModel tables."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class IntIDMixin(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True)


class CreatedAtMixin(SQLModel):
    # Set by the store clock, not by the database
    created_at: datetime = Field(nullable=False, sa_type=sa.DateTime(timezone=True))
