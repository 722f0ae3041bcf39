from datetime import datetime
from pydantic import BaseModel, Field


class PitchCreate(BaseModel):
    buyer_id: int
    message: str = Field(min_length=1, max_length=2000)


class PitchRead(BaseModel):
    id: int
    seller_id: int
    buyer_id: int
    message: str
    created_at: datetime

    model_config = {"from_attributes": True}
