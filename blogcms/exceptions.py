"""
Error taxonomy shared by the repositories and the HTTP layer.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("blogcms.errors")


class BlogCMSError(Exception):
    """Base exception for blogcms"""
    code = "BLOGCMS_ERROR"
    status_code = 500
    default_message = "internal error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
        }


class NotFound(BlogCMSError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "record not found"


class AuthError(BlogCMSError):
    code = "AUTH_ERROR"
    status_code = 401
    default_message = "authentication required"


class TokenNotFound(NotFound):
    code = "TOKEN_NOT_FOUND"
    status_code = 401
    default_message = "no matching token found"


class MalformedHeader(AuthError):
    code = "MALFORMED_HEADER"
    default_message = "no valid authorization header received"


class MalformedToken(AuthError):
    code = "MALFORMED_TOKEN"
    default_message = "token wrong size"


class TokenExpired(AuthError):
    code = "TOKEN_EXPIRED"
    default_message = "expired token"


class PasswordMismatch(AuthError):
    code = "INVALID_CREDENTIALS"
    default_message = "invalid username/password"


class UserInactive(AuthError):
    code = "USER_INACTIVE"
    status_code = 403
    default_message = "user is not active"


class PasswordTooLong(BlogCMSError):
    code = "PASSWORD_TOO_LONG"
    status_code = 400
    default_message = "password too long (bcrypt max 72 bytes)"


class AssociationWriteError(BlogCMSError):
    """The blog row and its category rows were rolled back together."""
    code = "CATEGORY_WRITE_FAILED"
    status_code = 422
    default_message = "blog not saved: categories could not be written"

    def __init__(self, message: str = None, blog_id: int = None, category_ids=None):
        super().__init__(message)
        self.blog_id = blog_id
        self.category_ids = list(category_ids or [])


class StoreError(BlogCMSError):
    code = "STORE_ERROR"
    status_code = 503
    default_message = "database error"


class StoreTimeout(StoreError):
    code = "STORE_TIMEOUT"
    status_code = 504
    default_message = "database call timed out"


class StoreUnavailable(StoreError):
    code = "STORE_UNAVAILABLE"
    status_code = 503
    default_message = "database unavailable"


class ConstraintViolation(StoreError):
    code = "CONSTRAINT_VIOLATION"
    status_code = 409
    default_message = "constraint violation"


def register_exception_handlers(app: FastAPI):
    """Render BlogCMSError subclasses as the JSON envelope"""

    @app.exception_handler(BlogCMSError)
    async def handle_blogcms_error(request: Request, exc: BlogCMSError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
