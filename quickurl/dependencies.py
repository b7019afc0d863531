"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the URL record store and the
redirect cache that are injected into services and routes.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (override with an in-memory store)
- Flexible (swap implementations via config)
"""

from functools import lru_cache

from fastapi import Depends

from quickurl.cache.factory import CacheFactory, CacheBackend
from quickurl.cache.strategies import CacheStrategy
from quickurl.config import settings
from quickurl.services.url_service import URLService
from quickurl.store.factory import URLStoreFactory, URLStoreBackend
from quickurl.store.strategies import URLStoreStrategy


@lru_cache()
def get_url_store() -> URLStoreStrategy:
    """
    Get URL record store instance (singleton).

    The SQL backend applies the schema migration on first use.
    """
    backend = URLStoreBackend(settings.store_backend)
    return URLStoreFactory.create(backend)


@lru_cache()
def get_cache() -> CacheStrategy:
    """Get cache instance (singleton) based on settings"""
    backend = CacheBackend(settings.cache_backend)
    return CacheFactory.create(backend)


def get_url_service(
    store: URLStoreStrategy = Depends(get_url_store),
    cache: CacheStrategy = Depends(get_cache)
) -> URLService:
    """
    Get URLService with all dependencies injected.

    - Controller depends on service
    - Service depends on infrastructure (store, cache)
    """
    return URLService(store=store, cache=cache)
