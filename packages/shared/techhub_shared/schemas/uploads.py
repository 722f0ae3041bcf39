from datetime import datetime
from pydantic import BaseModel, Field
from .common import UploadStatus


class UploadCreate(BaseModel):
    """Seller and buyer are taken from the request, never from the client."""
    request_id: int
    file_name: str = Field(min_length=1, max_length=255)
    file_path_ref: str = Field(min_length=1)


class UploadRead(BaseModel):
    id: int
    request_id: int
    seller_id: int
    buyer_id: int
    file_name: str
    file_path_ref: str
    status: UploadStatus
    created_at: datetime

    model_config = {"from_attributes": True}
