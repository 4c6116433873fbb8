"""
Pytest fixtures for blogcms tests.

Every test gets a fresh in-memory SQLite store with the schema created from
the table metadata.
"""
import pytest
from fastapi.testclient import TestClient

from blogcms.config import Settings
from blogcms.database import Store
from blogcms.entities import Category, User
from blogcms.main import create_app
from blogcms.repositories.blog_repository import BlogRepository
from blogcms.repositories.category_repository import CategoryRepository
from blogcms.repositories.token_repository import TokenAuthority
from blogcms.repositories.user_repository import UserRepository
from blogcms.utils.hashing import pwd_context

JACK_PASSWORD = "verysecret"


@pytest.fixture(scope="session", autouse=True)
def fast_bcrypt():
    """Lowest bcrypt cost so hashing doesn't dominate the run"""
    pwd_context.update(bcrypt__rounds=4)
    yield


@pytest.fixture
def store():
    s = Store.from_url("sqlite://", timeout=3.0)
    s.create_all()
    yield s
    s.dispose()


@pytest.fixture
def users(store):
    return UserRepository(store)


@pytest.fixture
def tokens(store, users):
    return TokenAuthority(store, users)


@pytest.fixture
def blogs(store):
    return BlogRepository(store)


@pytest.fixture
def categories(store):
    return CategoryRepository(store)


@pytest.fixture
def jack(users):
    """Active user, id 1"""
    new_id = users.insert(
        User(email="jack@example.com", first_name="Jack", last_name="Smith", active=1),
        JACK_PASSWORD,
    )
    return users.get_by_id(new_id)


@pytest.fixture
def jill(users):
    new_id = users.insert(
        User(email="jill@example.com", first_name="Jill", last_name="Adams", active=1),
        "anothersecret",
    )
    return users.get_by_id(new_id)


@pytest.fixture
def genres(categories):
    """Category name -> id, inserted in this order (ids 1..7)"""
    names = ["Science Fiction", "Fantasy", "Romance", "Thriller", "Mystery", "Horror", "Classic"]
    return {name: categories.insert(Category(category_name=name)) for name in names}


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL="sqlite://",
        STATIC_DIR=str(tmp_path / "static"),
        LOG_DIR=str(tmp_path / "logs"),
        LOGIN_TOKEN_TTL_HOURS=24,
    )


@pytest.fixture
def client(settings, store):
    app = create_app(settings, store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_header(client, jack):
    resp = client.post("/users/login", json={"email": jack.email, "password": JACK_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['data']['token']['token']}"}
