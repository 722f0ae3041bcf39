"""Pitch model."""

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, IntIDMixin


class PitchRow(IntIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "pitches"

    seller_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    buyer_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    message: str = Field(nullable=False)
