import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException

from blogcms.entities import User
from blogcms.exceptions import AuthError, TokenNotFound
from blogcms.repositories.token_repository import TokenAuthority
from blogcms.utils.deps import get_tokens

logger = logging.getLogger("blogcms.auth")


def get_current_user(
    authorization: Optional[str] = Header(None),
    tokens: TokenAuthority = Depends(get_tokens),
) -> User:
    """Auth gate for protected routes: resolves the bearer token or rejects the request"""
    try:
        return tokens.authenticate_token(authorization)
    except (AuthError, TokenNotFound) as exc:
        logger.info("rejected request: %s", exc.message)
        raise HTTPException(
            status_code=exc.status_code,
            detail=exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
