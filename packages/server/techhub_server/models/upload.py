"""Delivered work upload model."""

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, IntIDMixin


class UploadRow(IntIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "uploads"

    request_id: int = Field(foreign_key="requests.id", nullable=False, index=True)
    seller_id: int = Field(foreign_key="users.id", nullable=False)
    buyer_id: int = Field(foreign_key="users.id", nullable=False)
    file_name: str = Field(nullable=False)
    file_path_ref: str = Field(nullable=False)
    status: str = Field(default="pending", nullable=False)  # pending | approved
