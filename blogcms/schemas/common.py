from typing import Any, Optional

from pydantic import BaseModel


class JsonResponse(BaseModel):
    error: bool = False
    message: str = ""
    data: Optional[Any] = None


class IdIn(BaseModel):
    id: int
