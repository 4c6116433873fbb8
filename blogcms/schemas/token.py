from datetime import datetime

from pydantic import BaseModel


class LoginIn(BaseModel):
    email: str
    password: str


class TokenIn(BaseModel):
    token: str


class TokenOut(BaseModel):
    user_id: int
    email: str
    token: str
    expiry: datetime
