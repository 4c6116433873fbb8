import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Request

from blogcms.exceptions import NotFound, PasswordMismatch, UserInactive
from blogcms.repositories.token_repository import TokenAuthority
from blogcms.repositories.user_repository import UserRepository
from blogcms.schemas.common import JsonResponse
from blogcms.schemas.token import LoginIn, TokenIn, TokenOut
from blogcms.schemas.user import UserOut
from blogcms.utils.deps import get_tokens, get_users

logger = logging.getLogger("blogcms.auth")


router = APIRouter(prefix="/users", tags=["Auth"])


# login
@router.post("/login", response_model=JsonResponse)
def login(
    creds: LoginIn,
    request: Request,
    users: UserRepository = Depends(get_users),
    tokens: TokenAuthority = Depends(get_tokens),
):
    try:
        user = users.get_by_email(creds.email)
    except NotFound:
        raise PasswordMismatch()

    if not users.password_matches(user, creds.password):
        raise PasswordMismatch()

    if not user.active:
        raise UserInactive()

    ttl = timedelta(hours=request.app.state.settings.LOGIN_TOKEN_TTL_HOURS)
    token = tokens.generate_token(user.id, ttl)
    tokens.insert(token, user)
    logger.info("user %s logged in", user.id)

    return JsonResponse(
        message="logged in",
        data={
            "token": TokenOut(
                user_id=token.user_id,
                email=token.email,
                token=token.plaintext,
                expiry=token.expiry,
            ),
            "user": UserOut.model_validate(user),
        },
    )


# logout
@router.post("/logout", response_model=JsonResponse)
def logout(body: TokenIn, tokens: TokenAuthority = Depends(get_tokens)):
    tokens.delete_by_token(body.token)
    return JsonResponse(message="logged out")


@router.post("/validate-token", response_model=JsonResponse)
def validate_token(body: TokenIn, tokens: TokenAuthority = Depends(get_tokens)):
    return JsonResponse(data=tokens.valid_token(body.token))
