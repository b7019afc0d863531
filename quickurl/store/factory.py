"""
Factory for creating URL record store instances.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum
from .strategies import URLStoreStrategy, SQLAlchemyURLStore, InMemoryURLStore

logger = logging.getLogger(__name__)


class URLStoreBackend(Enum):
    """Available URL store backends"""
    SQL = "sql"
    MEMORY = "memory"


class URLStoreFactory:
    """
    Simple factory for creating URL store instances.

    Gets configuration from settings (not passed as parameters).
    The SQL backend is migrated before it is handed out.
    """

    _instance: URLStoreStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: URLStoreBackend) -> URLStoreStrategy:
        """
        Create or return cached URL store instance.

        Args:
            backend: Type of store backend (from enum)

        Returns:
            Singleton URL store instance
        """
        # Return cached instance if exists
        if cls._instance is not None:
            return cls._instance

        if backend == URLStoreBackend.SQL:
            from quickurl.database.connection import engine, SessionLocal
            from quickurl.database.migrations import apply_migrations

            apply_migrations(engine)
            cls._instance = SQLAlchemyURLStore(session_factory=SessionLocal)
            logger.info("SQL URL store initialized (%s)", engine.url.render_as_string(hide_password=True))

        elif backend == URLStoreBackend.MEMORY:
            cls._instance = InMemoryURLStore()
            logger.info("In-memory URL store initialized")

        else:
            raise ValueError(f"Unknown store backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
