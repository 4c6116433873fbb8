from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryOut(BaseModel):
    id: int
    category_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class CategorySaveIn(BaseModel):
    id: int = 0
    category_name: str = Field(..., min_length=1, max_length=255)
