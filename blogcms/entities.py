"""
Domain entities returned by the repositories.

These are what the persistence layer hands out; request/response bodies live
in ``blogcms.schemas`` and are mapped onto these explicitly.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from blogcms.utils.clock import utcnow


@dataclass
class User:
    email: str
    first_name: str = ""
    last_name: str = ""
    password: str = ""
    active: int = 0
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Token:
    user_id: int
    token_hash: bytes
    expiry: datetime
    # only set on a freshly minted token, never read back from the store
    plaintext: Optional[str] = None
    email: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_expired(self, now: datetime = None) -> bool:
        return self.expiry <= (now or utcnow())


@dataclass
class Category:
    category_name: str
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Author:
    id: Optional[int] = None
    first_name: Optional[str] = None


@dataclass
class Blog:
    title: str
    description: str = ""
    content: str = ""
    slug: str = ""
    created_by_id: Optional[int] = None
    created_by: Author = field(default_factory=Author)
    categories: List[Category] = field(default_factory=list)
    # write side: None leaves the association untouched on update
    category_ids: Optional[List[int]] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
