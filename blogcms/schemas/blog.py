from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from blogcms.schemas.category import CategoryOut


class AuthorOut(BaseModel):
    id: Optional[int] = None
    first_name: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class BlogOut(BaseModel):
    id: int
    title: str
    slug: str
    created_by_id: int
    created_by: AuthorOut
    description: Optional[str] = None
    content: Optional[str] = None
    categories: List[CategoryOut] = []
    category_ids: List[int] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class BlogSaveIn(BaseModel):
    """Client payload; slug and author are never taken from here."""
    id: int = 0
    title: str = Field(..., min_length=1, max_length=512)
    description: str = ""
    content: str = ""
    # base64 encoded jpg
    banner: Optional[str] = None
    # None keeps the current categories on update
    category_ids: Optional[List[int]] = None
