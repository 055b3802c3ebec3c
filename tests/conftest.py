import pytest
from doubles import FakeDatabase, FakePool

from web_counter.app import create_app
from web_counter.store import MemoryCounter, PgCounter


@pytest.fixture
def store():
    return MemoryCounter()


@pytest.fixture
def client(store):
    app = create_app(store)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def pg_store(db):
    s = PgCounter(FakePool(db))
    s.initialize()
    yield s
    s.close()


@pytest.fixture
def clean_env(monkeypatch):
    """Ensure no env vars interfere with tests."""
    for name in ("STORAGE", "PG_DSN", "DB_USER", "DB_NAME", "DB_HOST", "DB_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
