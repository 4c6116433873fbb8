"""
Tests for the store handle: timeouts and error translation
"""
import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from blogcms.config import Settings
from blogcms.database import Store, translate_errors
from blogcms.exceptions import ConstraintViolation, StoreTimeout, StoreUnavailable


class _PgError(Exception):
    pgcode = "57014"


class TestTranslateErrors:

    def test_statement_timeout(self):
        with pytest.raises(StoreTimeout):
            with translate_errors(3):
                raise OperationalError("select 1", {}, _PgError("canceling statement due to statement timeout"))

    def test_pool_checkout_timeout(self):
        with pytest.raises(StoreTimeout):
            with translate_errors(3):
                raise PoolTimeoutError("QueuePool limit of size 5 overflow 10 reached")

    def test_connection_failure(self):
        with pytest.raises(StoreUnavailable):
            with translate_errors(3):
                raise OperationalError("select 1", {}, Exception("could not connect to server"))

    def test_integrity_error(self):
        with pytest.raises(ConstraintViolation):
            with translate_errors(3):
                raise IntegrityError("insert", {}, Exception("duplicate key"))

    def test_other_errors_pass_through(self):
        with pytest.raises(ProgrammingError):
            with translate_errors(3):
                raise ProgrammingError("selec 1", {}, Exception("syntax error"))


class TestStore:

    def test_slow_query_is_cut_off(self):
        store = Store.from_url("sqlite://", timeout=0.05)
        slow = text(
            "WITH RECURSIVE c(x) AS (SELECT 1 UNION ALL SELECT x + 1 FROM c WHERE x < 200000000) "
            "SELECT count(*) FROM c"
        )
        with pytest.raises(StoreTimeout):
            with store.connect() as conn:
                conn.execute(slow).scalar()

        # the connection is usable afterwards
        with store.connect() as conn:
            assert conn.execute(text("select 1")).scalar() == 1
        store.dispose()

    def test_transaction_rolls_back(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction() as conn:
                conn.execute(
                    text(
                        "insert into categorys (category_name, created_at, updated_at) "
                        "values ('Poetry', '2020-01-01 01:00:00', '2020-01-01 01:00:00')"
                    )
                )
                raise RuntimeError("boom")

        with store.connect() as conn:
            assert conn.execute(text("select count(*) from categorys")).scalar() == 0

    def test_lock_user_is_noop_on_sqlite(self, store):
        with store.transaction() as conn:
            store.lock_user(conn, 1)

    def test_settings_build_postgres_url(self):
        s = Settings(DB_HOST="db", DB_PORT=5433, DB_USER="blog", DB_PASSWORD="pw", DB_NAME="blogs")
        url = s.database_url
        assert url.drivername == "postgresql+psycopg2"
        assert (url.host, url.port, url.database) == ("db", 5433, "blogs")

    def test_settings_database_url_override(self):
        assert Settings(DATABASE_URL="sqlite:///x.db").database_url == "sqlite:///x.db"
