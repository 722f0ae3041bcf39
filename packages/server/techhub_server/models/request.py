"""Custom job request model."""

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, IntIDMixin


class RequestRow(IntIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "requests"

    buyer_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    seller_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    title: str = Field(nullable=False)
    description: str = Field(nullable=False)
    price_cents: int = Field(nullable=False)
    status: str = Field(default="pending", nullable=False)  # pending | accepted | rejected | completed
