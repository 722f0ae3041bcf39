from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class RatingCreate(BaseModel):
    seller_id: int
    project_id: Optional[int] = None
    request_id: Optional[int] = None
    rating_value: int = Field(ge=1, le=5)
    review: Optional[str] = Field(default=None, max_length=2000)


class RatingRead(BaseModel):
    id: int
    buyer_id: int
    seller_id: int
    project_id: Optional[int] = None
    request_id: Optional[int] = None
    rating_value: int
    review: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
