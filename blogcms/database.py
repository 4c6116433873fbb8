import math
import time
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import MetaData, create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.pool import StaticPool

from blogcms.exceptions import ConstraintViolation, StoreTimeout, StoreUnavailable

metadata = MetaData()

# postgres "canceling statement due to statement timeout"
QUERY_CANCELED = "57014"


def build_engine(url, timeout: float) -> Engine:
    url = make_url(url)

    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": timeout}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_timeout=timeout,
        connect_args={
            "connect_timeout": max(1, math.ceil(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        },
    )


def _is_timeout(exc: DBAPIError) -> bool:
    if getattr(exc.orig, "pgcode", None) == QUERY_CANCELED:
        return True
    msg = str(exc.orig).lower()
    return "statement timeout" in msg or "interrupted" in msg or "database is locked" in msg


@contextmanager
def translate_errors(timeout: float):
    """Turn driver failures into StoreTimeout / StoreUnavailable / ConstraintViolation."""
    try:
        yield
    except PoolTimeoutError as exc:
        raise StoreTimeout(f"no database connection available within {timeout}s") from exc
    except IntegrityError as exc:
        raise ConstraintViolation(str(exc.orig)) from exc
    except DBAPIError as exc:
        if _is_timeout(exc):
            raise StoreTimeout(f"database call exceeded {timeout}s") from exc
        if exc.connection_invalidated or isinstance(exc, (OperationalError, InterfaceError)):
            raise StoreUnavailable(str(exc.orig)) from exc
        raise


class Store:
    """Pooled database handle shared by all repositories.

    Every call is bounded by ``timeout`` seconds: postgres connections carry a
    statement_timeout, sqlite connections get a progress-handler deadline.
    """

    def __init__(self, engine: Engine, timeout: float = 3.0):
        self.engine = engine
        self.timeout = timeout

    @classmethod
    def from_url(cls, url, timeout: float = 3.0) -> "Store":
        return cls(build_engine(url, timeout), timeout)

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def connect(self):
        with translate_errors(self.timeout):
            with self.engine.connect() as conn:
                with self._deadline(conn):
                    yield conn

    @contextmanager
    def transaction(self):
        with translate_errors(self.timeout):
            with self.engine.begin() as conn:
                with self._deadline(conn):
                    yield conn

    @contextmanager
    def _deadline(self, conn):
        if self.dialect != "sqlite":
            yield
            return

        raw = conn.connection.driver_connection
        deadline = time.monotonic() + self.timeout
        raw.set_progress_handler(lambda: int(time.monotonic() > deadline), 1000)
        try:
            yield
        finally:
            raw.set_progress_handler(None, 1000)

    def lock_user(self, conn, user_id: int):
        # released on commit/rollback
        if self.dialect == "postgresql":
            conn.execute(text("select pg_advisory_xact_lock(:key)"), {"key": user_id})

    def create_all(self):
        # tables register on import
        from blogcms.models import blog, category, token, user  # noqa: F401

        with translate_errors(self.timeout):
            metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()


def get_store(request: Request) -> Store:
    return request.app.state.store
