"""
Blogs and their many-to-many categories.

The ``blogs_categorys`` join table is the only record of which categories a
blog has. Reads rebuild ``Blog.categories`` (ordered by name) and the parallel
``Blog.category_ids`` from it every time; writes bring it in line with
``Blog.category_ids`` inside the same transaction as the blog row.
"""
from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from slugify import slugify
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError

from blogcms.database import Store
from blogcms.entities import Blog, Category
from blogcms.exceptions import AssociationWriteError, NotFound
from blogcms.models.blog import blogs
from blogcms.models.category import blogs_categorys, categorys
from blogcms.models.user import users
from blogcms.repositories.rows import blog_from_row, category_from_row
from blogcms.utils.clock import naive_utcnow


def _blog_query():
    # blog columns plus the author's id and first name
    return select(
        blogs.c.id,
        blogs.c.title,
        blogs.c.slug,
        blogs.c.createdby_id,
        blogs.c.description,
        blogs.c.content,
        blogs.c.created_at,
        blogs.c.updated_at,
        users.c.id.label("author_id"),
        users.c.first_name.label("author_first_name"),
    ).select_from(blogs.outerjoin(users, blogs.c.createdby_id == users.c.id))


def _category_query():
    return (
        select(blogs_categorys.c.blog_id, categorys)
        .select_from(blogs_categorys.join(categorys, blogs_categorys.c.category_id == categorys.c.id))
        .order_by(categorys.c.category_name, categorys.c.id)
    )


class BlogRepository:
    """Repository for blogs database operations"""

    def __init__(self, store: Store):
        self.store = store

    def get_all(self) -> List[Blog]:
        """All blogs ordered by title, each with its categories"""
        stmt = _blog_query().order_by(blogs.c.title, blogs.c.id)
        with self.store.connect() as conn:
            return self._load(conn, stmt)

    def get_all_paginated(self, page: int, page_size: int) -> List[Blog]:
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be >= 1")
        stmt = (
            _blog_query()
            .order_by(blogs.c.title, blogs.c.id)
            .limit(page_size)
            .offset((page - 1) * page_size)
        )
        with self.store.connect() as conn:
            return self._load(conn, stmt)

    def get_one_by_id(self, blog_id: int) -> Blog:
        stmt = _blog_query().where(blogs.c.id == blog_id)
        with self.store.connect() as conn:
            found = self._load(conn, stmt)
        if not found:
            raise NotFound(f"blog {blog_id} not found")
        return found[0]

    def get_one_by_slug(self, slug: str) -> Blog:
        # slugs are not unique; the oldest blog wins
        stmt = _blog_query().where(blogs.c.slug == slug).order_by(blogs.c.id).limit(1)
        with self.store.connect() as conn:
            found = self._load(conn, stmt)
        if not found:
            raise NotFound(f"blog {slug!r} not found")
        return found[0]

    def get_by_author(self, user_id: int) -> List[Blog]:
        stmt = _blog_query().where(blogs.c.createdby_id == user_id).order_by(blogs.c.title, blogs.c.id)
        with self.store.connect() as conn:
            return self._load(conn, stmt)

    def categories_for_blog(self, blog_id: int) -> Tuple[List[Category], List[int]]:
        """Categories of one blog ordered by name, plus their ids in the same order"""
        with self.store.connect() as conn:
            by_blog = self._categories_for(conn, [blog_id])
        found = by_blog.get(blog_id, [])
        return found, [c.id for c in found]

    def create(self, blog: Blog) -> int:
        """Insert the blog and its category associations, returns the new id.

        The slug is derived from the title here. If the categories can't be
        written the blog row is rolled back with them.
        """
        now = naive_utcnow()
        stmt = insert(blogs).values(
            title=blog.title,
            slug=slugify(blog.title),
            createdby_id=blog.created_by_id,
            description=blog.description,
            content=blog.content,
            created_at=now,
            updated_at=now,
        )
        with self.store.transaction() as conn:
            new_id = conn.execute(stmt).inserted_primary_key[0]
            if blog.category_ids:
                self._write_categories(conn, new_id, blog.category_ids, now)
        return new_id

    def update(self, blog: Blog):
        """Save title, description and content and re-derive the slug.

        The author never changes. When ``blog.category_ids`` is not None the
        association is brought in line with it (an empty list clears it).
        """
        now = naive_utcnow()
        with self.store.transaction() as conn:
            # row lock on postgres so concurrent updates don't interleave the diff
            locked = conn.execute(
                select(blogs.c.id).where(blogs.c.id == blog.id).with_for_update()
            ).first()
            if locked is None:
                raise NotFound(f"blog {blog.id} not found")

            conn.execute(
                update(blogs)
                .where(blogs.c.id == blog.id)
                .values(
                    title=blog.title,
                    slug=slugify(blog.title),
                    description=blog.description,
                    content=blog.content,
                    updated_at=now,
                )
            )
            if blog.category_ids is not None:
                self._write_categories(conn, blog.id, blog.category_ids, now)

    def delete_by_id(self, blog_id: int):
        """Delete a blog and its join rows"""
        with self.store.transaction() as conn:
            conn.execute(delete(blogs_categorys).where(blogs_categorys.c.blog_id == blog_id))
            result = conn.execute(delete(blogs).where(blogs.c.id == blog_id))
            if result.rowcount == 0:
                raise NotFound(f"blog {blog_id} not found")

    def _load(self, conn, stmt) -> List[Blog]:
        found = [blog_from_row(r) for r in conn.execute(stmt).all()]
        if not found:
            return found

        # one category query for the whole page instead of one per blog
        by_blog = self._categories_for(conn, [b.id for b in found])
        for b in found:
            b.categories = by_blog.get(b.id, [])
            b.category_ids = [c.id for c in b.categories]
        return found

    @staticmethod
    def _categories_for(conn, blog_ids: Sequence[int]) -> Dict[int, List[Category]]:
        stmt = _category_query().where(blogs_categorys.c.blog_id.in_(blog_ids))
        by_blog = defaultdict(list)
        for row in conn.execute(stmt).all():
            by_blog[row._mapping["blog_id"]].append(category_from_row(row))
        return by_blog

    @staticmethod
    def _write_categories(conn, blog_id: int, category_ids: Sequence[int], now):
        wanted = list(dict.fromkeys(category_ids))

        known = set(
            conn.execute(select(categorys.c.id).where(categorys.c.id.in_(wanted))).scalars()
        ) if wanted else set()
        missing = [c for c in wanted if c not in known]
        if missing:
            raise AssociationWriteError(
                f"blog not saved: unknown category ids {missing}",
                blog_id=blog_id,
                category_ids=missing,
            )

        current = set(
            conn.execute(
                select(blogs_categorys.c.category_id).where(blogs_categorys.c.blog_id == blog_id)
            ).scalars()
        )
        removed = current - set(wanted)
        added = [c for c in wanted if c not in current]

        try:
            if removed:
                conn.execute(
                    delete(blogs_categorys).where(
                        blogs_categorys.c.blog_id == blog_id,
                        blogs_categorys.c.category_id.in_(removed),
                    )
                )
            if added:
                conn.execute(
                    insert(blogs_categorys),
                    [
                        {"blog_id": blog_id, "category_id": c, "created_at": now, "updated_at": now}
                        for c in added
                    ],
                )
        except IntegrityError as exc:
            raise AssociationWriteError(
                f"blog not saved: categories not written: {exc.orig}",
                blog_id=blog_id,
                category_ids=added,
            ) from exc
