from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime
from .common import MIN_PROJECT_PRICE_CENTS, ProjectType


class ProjectBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    price_cents: int = Field(ge=MIN_PROJECT_PRICE_CENTS)
    project_type: ProjectType
    language_tags: List[str] = Field(default_factory=list)
    file_path_ref: Optional[str] = None
    command_inputs: Optional[str] = None


class ProjectCreate(ProjectBase):
    pass


class ProjectRead(ProjectBase):
    id: int
    seller_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
