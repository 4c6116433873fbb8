"""
Tests for the user repository
"""
import pytest
from sqlalchemy import update

from blogcms.entities import User
from blogcms.exceptions import ConstraintViolation, NotFound, PasswordTooLong
from blogcms.models.user import users as users_table

JACK_PASSWORD = "verysecret"


class TestUserRepository:

    def test_insert_hashes_password(self, users, jack):
        assert jack.id == 1
        assert jack.password != JACK_PASSWORD
        assert jack.password.startswith("$2")
        assert users.password_matches(jack, JACK_PASSWORD) is True
        assert users.password_matches(jack, "wrong") is False

    def test_get_by_email(self, users, jack):
        found = users.get_by_email("jack@example.com")
        assert found.id == jack.id
        assert found.first_name == "Jack"
        assert found.active == 1

    def test_get_missing(self, users):
        with pytest.raises(NotFound):
            users.get_by_email("nobody@example.com")
        with pytest.raises(NotFound):
            users.get_by_id(3)

    def test_get_all_sorted_by_last_name(self, users, jack, jill):
        assert [u.last_name for u in users.get_all()] == ["Adams", "Smith"]

    def test_duplicate_email(self, users, jack):
        with pytest.raises(ConstraintViolation):
            users.insert(User(email="jack@example.com", first_name="J", last_name="S"), "pw")

    def test_update(self, users, jack):
        jack.first_name = "Jackson"
        jack.email = "jackson@example.com"
        users.update(jack)

        found = users.get_by_id(jack.id)
        assert found.first_name == "Jackson"
        assert found.email == "jackson@example.com"

    def test_update_missing(self, users):
        with pytest.raises(NotFound):
            users.update(User(id=9, email="ghost@example.com", active=1))

    def test_reset_password(self, users, jack):
        users.reset_password(jack.id, "brand-new")
        found = users.get_by_id(jack.id)
        assert users.password_matches(found, "brand-new") is True
        assert users.password_matches(found, JACK_PASSWORD) is False

    def test_password_too_long(self, users, jack):
        with pytest.raises(PasswordTooLong):
            users.reset_password(jack.id, "x" * 73)

    def test_delete(self, users, jack):
        users.delete_by_id(jack.id)
        with pytest.raises(NotFound):
            users.get_by_id(jack.id)
        with pytest.raises(NotFound):
            users.delete_by_id(jack.id)

    def test_update_with_password(self, users, jack):
        jack.first_name = "Jackson"
        users.update(jack, password="brand-new")

        found = users.get_by_id(jack.id)
        assert found.first_name == "Jackson"
        assert users.password_matches(found, "brand-new") is True

    def test_update_rejected_password_leaves_row(self, users, jack):
        jack.email = "changed@example.com"
        jack.active = 0
        # 40 characters, 80 bytes
        with pytest.raises(PasswordTooLong):
            users.update(jack, password="é" * 40)

        found = users.get_by_id(jack.id)
        assert found.email == "jack@example.com"
        assert found.active == 1
        assert users.password_matches(found, JACK_PASSWORD) is True

    def test_unreadable_hash_does_not_match(self, store, users, jack):
        with store.transaction() as conn:
            conn.execute(update(users_table).where(users_table.c.id == jack.id).values(password="not-a-hash"))
        assert users.password_matches(users.get_by_id(jack.id), JACK_PASSWORD) is False
