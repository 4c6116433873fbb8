"""
Session tokens.

A token is 16 random bytes, base32 encoded without padding (26 characters).
Only its SHA-256 digest (HMAC-SHA256 when a key is configured) is stored, and
every lookup hashes the presented plaintext first and matches on the digest.
A user holds at most one token: issuing a new one deletes the old ones.
"""
import base64
import hashlib
import hmac
import secrets
from datetime import timedelta
from typing import Optional

from sqlalchemy import delete, insert, select

from blogcms.database import Store
from blogcms.entities import Token, User
from blogcms.exceptions import (
    MalformedHeader,
    MalformedToken,
    NotFound,
    TokenExpired,
    TokenNotFound,
    UserInactive,
)
from blogcms.models.token import tokens
from blogcms.repositories.rows import token_from_row
from blogcms.utils.clock import naive_utcnow, utcnow

TOKEN_LENGTH = 26
TOKEN_BYTES = 16


def revoke_user_tokens(conn, user_id: int) -> int:
    """Delete every token row of ``user_id`` on an open connection"""
    result = conn.execute(delete(tokens).where(tokens.c.user_id == user_id))
    return result.rowcount


class TokenAuthority:
    """Mints, stores, resolves and revokes bearer tokens"""

    def __init__(self, store: Store, users, hash_key: Optional[bytes] = None):
        self.store = store
        self.users = users
        self.hash_key = hash_key

    def hash_token(self, plaintext: str) -> bytes:
        data = plaintext.encode("utf-8")
        if self.hash_key:
            return hmac.new(self.hash_key, data, hashlib.sha256).digest()
        return hashlib.sha256(data).digest()

    def generate_token(self, user_id: int, ttl: timedelta) -> Token:
        """Build a new token for ``user_id``; nothing is written to the store"""
        random_bytes = secrets.token_bytes(TOKEN_BYTES)
        plaintext = base64.b32encode(random_bytes).decode("ascii").rstrip("=")
        return Token(
            user_id=user_id,
            plaintext=plaintext,
            token_hash=self.hash_token(plaintext),
            expiry=utcnow() + ttl,
        )

    def insert(self, token: Token, user: User):
        """Persist ``token`` for ``user``, replacing any token the user already has"""
        if token.user_id != user.id:
            raise ValueError(f"token belongs to user {token.user_id}, not {user.id}")

        now = naive_utcnow()
        stmt = insert(tokens).values(
            user_id=user.id,
            email=user.email,
            token=token.token_hash.hex(),
            token_hash=token.token_hash,
            expiry=token.expiry,
            created_at=now,
            updated_at=now,
        )
        with self.store.transaction() as conn:
            # serialise concurrent logins of the same user
            self.store.lock_user(conn, user.id)
            revoke_user_tokens(conn, user.id)
            result = conn.execute(stmt)

        token.id = result.inserted_primary_key[0]
        token.email = user.email
        token.created_at = now
        token.updated_at = now

    def get_by_token(self, plaintext: str) -> Token:
        """Resolve a plaintext token.

        Raises TokenNotFound when no row carries its digest and TokenExpired
        when the row exists but its expiry has passed.
        """
        digest = self.hash_token(plaintext)
        with self.store.connect() as conn:
            row = conn.execute(select(tokens).where(tokens.c.token_hash == digest)).first()
        if row is None:
            raise TokenNotFound()

        token = token_from_row(row)
        if token.is_expired():
            raise TokenExpired()
        return token

    def authenticate_token(self, authorization_header: Optional[str]) -> User:
        """Turn an ``Authorization: Bearer <token>`` header into its user"""
        if not authorization_header:
            raise MalformedHeader("no authorization header received")

        header_parts = authorization_header.split(" ")
        if len(header_parts) != 2 or header_parts[0] != "Bearer":
            raise MalformedHeader()

        plaintext = header_parts[1]
        if len(plaintext) != TOKEN_LENGTH:
            raise MalformedToken()

        token = self.get_by_token(plaintext)

        try:
            user = self.users.get_by_id(token.user_id)
        except NotFound:
            raise TokenNotFound("no matching user found")

        if not user.active:
            raise UserInactive()
        return user

    def delete_by_token(self, plaintext: str):
        digest = self.hash_token(plaintext)
        with self.store.transaction() as conn:
            conn.execute(delete(tokens).where(tokens.c.token_hash == digest))

    def delete_tokens_for_user(self, user_id: int) -> int:
        with self.store.transaction() as conn:
            return revoke_user_tokens(conn, user_id)

    def valid_token(self, plaintext: str) -> bool:
        """False for unknown or expired tokens; store failures still raise"""
        try:
            self.get_by_token(plaintext)
        except (TokenNotFound, TokenExpired):
            return False
        return True

    def delete_expired(self) -> int:
        """Remove tokens whose expiry has passed, returns the number deleted"""
        with self.store.transaction() as conn:
            result = conn.execute(delete(tokens).where(tokens.c.expiry <= utcnow()))
        return result.rowcount
