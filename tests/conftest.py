"""
Test configuration and fixtures for QuickURL.
This centralizes all test setup, making individual tests clean.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from main import app
from quickurl.cache.strategies import InMemoryCache
from quickurl.database.connection import create_db_engine
from quickurl.database.migrations import apply_migrations
from quickurl.dependencies import get_cache, get_url_store
from quickurl.store.strategies import InMemoryURLStore, SQLAlchemyURLStore


# Fixed creation instant for store tests that pass `now` explicitly
T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """
    Fresh file-backed SQLite database per test, migrated.

    A file (not :memory:) so that every thread sees the same database.
    """
    engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}", busy_timeout=30)
    apply_migrations(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture(scope="function")
def sql_store(db_engine):
    return SQLAlchemyURLStore(sessionmaker(autoflush=False, bind=db_engine))


@pytest.fixture(scope="function")
def memory_store():
    return InMemoryURLStore()


@pytest.fixture(params=["sql", "memory"])
def url_store(request):
    """Run store tests against every backend"""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture(scope="function")
def cache():
    return InMemoryCache()


@pytest.fixture(scope="function")
def client(sql_store, cache):
    """
    Create a test client with store and cache dependencies overridden.
    This is the main fixture that API tests will use.
    """
    app.dependency_overrides[get_url_store] = lambda: sql_store
    app.dependency_overrides[get_cache] = lambda: cache

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
