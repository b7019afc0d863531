"""
URL record store module.

This module implements the Strategy Pattern for the persistence substrate
of short URL records: creation, lookups, click counting and expiry sweeps.
"""

from .strategies import URLStoreStrategy, SQLAlchemyURLStore, InMemoryURLStore
from .factory import URLStoreFactory, URLStoreBackend

__all__ = [
    "URLStoreStrategy",
    "SQLAlchemyURLStore",
    "InMemoryURLStore",
    "URLStoreFactory",
    "URLStoreBackend",
]
