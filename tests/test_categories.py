"""
Tests for the category repository
"""
import pytest

from blogcms.entities import Blog, Category
from blogcms.exceptions import NotFound


class TestCategoryRepository:

    def test_get_all_sorted_by_name(self, categories, genres):
        names = [c.category_name for c in categories.get_all()]
        assert names == sorted(genres)

    def test_get_by_id(self, categories, genres):
        assert categories.get_by_id(genres["Horror"]).category_name == "Horror"
        with pytest.raises(NotFound):
            categories.get_by_id(100)

    def test_update(self, categories, genres):
        categories.update(Category(id=genres["Classic"], category_name="Classics"))
        assert categories.get_by_id(genres["Classic"]).category_name == "Classics"

    def test_update_missing(self, categories):
        with pytest.raises(NotFound):
            categories.update(Category(id=5, category_name="Nope"))

    def test_delete_detaches_from_blogs(self, categories, blogs, jack, genres):
        blog_id = blogs.create(
            Blog(title="Spooky", created_by_id=jack.id, category_ids=[genres["Horror"], genres["Mystery"]])
        )
        categories.delete_by_id(genres["Horror"])

        b = blogs.get_one_by_id(blog_id)
        assert b.category_ids == [genres["Mystery"]]
        with pytest.raises(NotFound):
            categories.delete_by_id(genres["Horror"])
