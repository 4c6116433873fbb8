"""
Repository for users
"""
from typing import List, Optional

from sqlalchemy import delete, insert, select, update

from blogcms.database import Store
from blogcms.entities import User
from blogcms.exceptions import NotFound
from blogcms.models.user import users
from blogcms.repositories.rows import user_from_row
from blogcms.repositories.token_repository import revoke_user_tokens
from blogcms.utils.clock import naive_utcnow
from blogcms.utils.hashing import hash_password, verify_password


class UserRepository:
    """Repository for users database operations"""

    def __init__(self, store: Store):
        self.store = store

    def get_all(self) -> List[User]:
        """All users, sorted by last name"""
        stmt = select(users).order_by(users.c.last_name, users.c.id)
        with self.store.connect() as conn:
            rows = conn.execute(stmt).all()
        return [user_from_row(r) for r in rows]

    def get_by_email(self, email: str) -> User:
        with self.store.connect() as conn:
            row = conn.execute(select(users).where(users.c.email == email)).first()
        if row is None:
            raise NotFound(f"no user with email {email}")
        return user_from_row(row)

    def get_by_id(self, user_id: int) -> User:
        with self.store.connect() as conn:
            row = conn.execute(select(users).where(users.c.id == user_id)).first()
        if row is None:
            raise NotFound(f"user {user_id} not found")
        return user_from_row(row)

    def insert(self, user: User, password: str) -> int:
        """Insert a new user with a bcrypt hash of ``password`` and return its id"""
        hashed = hash_password(password)
        now = naive_utcnow()
        stmt = insert(users).values(
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            password=hashed,
            active=user.active,
            created_at=now,
            updated_at=now,
        )
        with self.store.transaction() as conn:
            result = conn.execute(stmt)
        return result.inserted_primary_key[0]

    def update(self, user: User, password: Optional[str] = None):
        """Save email, names and active flag, plus a new password when given.

        The password is hashed before anything is written, so a rejected
        password leaves the row untouched. Deactivating a user revokes every
        token they hold in the same transaction.
        """
        values = dict(
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            active=user.active,
            updated_at=naive_utcnow(),
        )
        if password is not None:
            values["password"] = hash_password(password)

        stmt = update(users).where(users.c.id == user.id).values(**values)
        with self.store.transaction() as conn:
            result = conn.execute(stmt)
            if result.rowcount == 0:
                raise NotFound(f"user {user.id} not found")
            if not user.active:
                revoke_user_tokens(conn, user.id)

    def delete_by_id(self, user_id: int):
        with self.store.transaction() as conn:
            revoke_user_tokens(conn, user_id)
            result = conn.execute(delete(users).where(users.c.id == user_id))
            if result.rowcount == 0:
                raise NotFound(f"user {user_id} not found")

    def reset_password(self, user_id: int, password: str):
        hashed = hash_password(password)
        stmt = (
            update(users)
            .where(users.c.id == user_id)
            .values(password=hashed, updated_at=naive_utcnow())
        )
        with self.store.transaction() as conn:
            result = conn.execute(stmt)
            if result.rowcount == 0:
                raise NotFound(f"user {user_id} not found")

    @staticmethod
    def password_matches(user: User, plain_text: str) -> bool:
        try:
            return verify_password(plain_text, user.password)
        except ValueError:
            # stored hash passlib can't identify
            return False
