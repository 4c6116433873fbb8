"""
Row -> entity conversion.

Blog rows come from the blogs/users outer join, so the author columns are
labelled ``author_id`` / ``author_first_name``.
"""
from blogcms.entities import Author, Blog, Category, Token, User
from blogcms.utils.clock import as_utc


def user_from_row(row) -> User:
    m = row._mapping
    return User(
        id=m["id"],
        email=m["email"],
        first_name=m["first_name"],
        last_name=m["last_name"],
        password=m["password"],
        active=m["active"] or 0,
        created_at=m["created_at"],
        updated_at=m["updated_at"],
    )


def token_from_row(row) -> Token:
    m = row._mapping
    return Token(
        id=m["id"],
        user_id=m["user_id"],
        email=m["email"],
        token_hash=bytes(m["token_hash"]),
        # sqlite hands timestamptz back naive
        expiry=as_utc(m["expiry"]),
        created_at=m["created_at"],
        updated_at=m["updated_at"],
    )


def category_from_row(row) -> Category:
    m = row._mapping
    return Category(
        id=m["id"],
        category_name=m["category_name"],
        created_at=m["created_at"],
        updated_at=m["updated_at"],
    )


def blog_from_row(row) -> Blog:
    m = row._mapping
    return Blog(
        id=m["id"],
        title=m["title"],
        slug=m["slug"],
        created_by_id=m["createdby_id"],
        created_by=Author(id=m["author_id"], first_name=m["author_first_name"]),
        description=m["description"],
        content=m["content"],
        created_at=m["created_at"],
        updated_at=m["updated_at"],
        category_ids=[],
    )
