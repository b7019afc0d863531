"""
Tests for storage failure handling.
"""
import pytest
from sqlalchemy.orm import sessionmaker

from quickurl.database.connection import create_db_engine
from quickurl.exceptions import QuickURLError, StorageUnavailableError
from quickurl.store.strategies import SQLAlchemyURLStore


@pytest.fixture
def unreachable_store(tmp_path):
    """Store pointing at a database file inside a directory that does not exist"""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'missing' / 'db.sqlite'}")
    yield SQLAlchemyURLStore(sessionmaker(bind=engine))
    engine.dispose()


class TestStorageUnavailable:
    """Connectivity failures surface as StorageUnavailableError"""

    @pytest.mark.parametrize("operation", [
        lambda store: store.create("abc123", "https://example.com", ttl=60),
        lambda store: store.lookup_by_token("abc123"),
        lambda store: store.lookup_by_id("some-id"),
        lambda store: store.increment_clicks("abc123"),
        lambda store: store.sweep(),
        lambda store: store.delete("some-id"),
        lambda store: store.list_urls(),
    ])
    def test_operations_raise_storage_unavailable(self, unreachable_store, operation):
        with pytest.raises(StorageUnavailableError) as exc_info:
            operation(unreachable_store)

        assert exc_info.value.error_code == "store:storage_unavailable_error"
        assert exc_info.value.__cause__ is not None

    def test_is_an_application_error(self):
        assert issubclass(StorageUnavailableError, QuickURLError)


class TestStorageUnavailableAPI:
    """The API maps storage failures to 503"""

    def test_returns_503(self, client, unreachable_store):
        from main import app
        from quickurl.dependencies import get_url_store

        app.dependency_overrides[get_url_store] = lambda: unreachable_store

        response = client.get("/api/v1/urls/abc123")

        assert response.status_code == 503
        assert response.json()["error_code"] == "store:storage_unavailable_error"
