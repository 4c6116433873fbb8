"""
Repository for categories
"""
from typing import List

from sqlalchemy import delete, insert, select, update

from blogcms.database import Store
from blogcms.entities import Category
from blogcms.exceptions import NotFound
from blogcms.models.category import blogs_categorys, categorys
from blogcms.repositories.rows import category_from_row
from blogcms.utils.clock import naive_utcnow


class CategoryRepository:
    """Repository for categorys database operations"""

    def __init__(self, store: Store):
        self.store = store

    def get_all(self) -> List[Category]:
        stmt = select(categorys).order_by(categorys.c.category_name, categorys.c.id)
        with self.store.connect() as conn:
            rows = conn.execute(stmt).all()
        return [category_from_row(r) for r in rows]

    def get_by_id(self, category_id: int) -> Category:
        with self.store.connect() as conn:
            row = conn.execute(select(categorys).where(categorys.c.id == category_id)).first()
        if row is None:
            raise NotFound(f"category {category_id} not found")
        return category_from_row(row)

    def insert(self, category: Category) -> int:
        now = naive_utcnow()
        stmt = insert(categorys).values(
            category_name=category.category_name,
            created_at=now,
            updated_at=now,
        )
        with self.store.transaction() as conn:
            result = conn.execute(stmt)
        return result.inserted_primary_key[0]

    def update(self, category: Category):
        stmt = (
            update(categorys)
            .where(categorys.c.id == category.id)
            .values(category_name=category.category_name, updated_at=naive_utcnow())
        )
        with self.store.transaction() as conn:
            result = conn.execute(stmt)
            if result.rowcount == 0:
                raise NotFound(f"category {category.id} not found")

    def delete_by_id(self, category_id: int):
        """Delete a category together with its blog associations"""
        with self.store.transaction() as conn:
            conn.execute(delete(blogs_categorys).where(blogs_categorys.c.category_id == category_id))
            result = conn.execute(delete(categorys).where(categorys.c.id == category_id))
            if result.rowcount == 0:
                raise NotFound(f"category {category_id} not found")
