from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserOut(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    active: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class UserSaveIn(BaseModel):
    # id 0 creates a new user
    id: int = 0
    email: str
    first_name: str
    last_name: str
    password: str = Field("", max_length=72)
    active: int = Field(1, ge=0, le=1)
