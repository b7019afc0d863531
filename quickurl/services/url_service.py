import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import HttpUrl

from quickurl.cache.strategies import CacheStrategy
from quickurl.config import settings
from quickurl.exceptions import DuplicateTokenError, InvalidInputError, URLExpiredError, URLNotFoundError
from quickurl.schemas.url import URLRecord
from quickurl.services.token_factory import TokenFactory
from quickurl.services.token_strategies import TokenStrategy
from quickurl.store.strategies import URLStoreStrategy
from quickurl.utils.helpers import as_utc, utcnow

logger = logging.getLogger(__name__)


class URLService:
    """
    URL Service with dependency injection for the record store and cache.

    This follows the Dependency Injection pattern:
    - Store, cache and token strategy are injected (not created internally)
    - Easy to test (inject an in-memory store / null cache)
    - Flexible (swap implementations without changing code)

    Store calls are synchronous (short, index-backed); cache calls are async.
    """

    def __init__(
        self,
        store: URLStoreStrategy,
        cache: Optional[CacheStrategy] = None,
        token_strategy: Optional[TokenStrategy] = None
    ):
        """
        Initialize URL service with dependencies.

        Args:
            store: URL record store
            cache: Cache strategy (optional, speeds up redirects)
            token_strategy: Token generator (defaults to the configured one)
        """
        self.store = store
        self.cache = cache
        self.token_strategy = token_strategy or TokenFactory.create_strategy()

    async def create_short_url(
        self,
        long_url: HttpUrl,
        title: Optional[str] = None,
        expires_at: Optional[datetime] = None
    ) -> URLRecord:
        """Create a new short URL

        The TTL is `expires_at - now`, or settings.default_ttl_seconds when no
        expiry is requested. A fresh token is proposed until the store accepts
        one; the store's atomic uniqueness check is what guarantees no two
        records share a token.

        Raises:
            InvalidInputError: expires_at is not in the future
            DuplicateTokenError: no free token after settings.max_retries attempts
        """
        now = utcnow()
        if expires_at is None:
            ttl = timedelta(seconds=settings.default_ttl_seconds)
        else:
            ttl = as_utc(expires_at) - now
            if ttl <= timedelta(0):
                raise InvalidInputError("expires_at must be in the future.")

        for attempt in range(1, settings.max_retries + 1):
            token = self.token_strategy.generate()
            try:
                record = self.store.create(token, str(long_url), ttl, title=title, now=now)
            except DuplicateTokenError:
                logger.info("Token collision on %r (attempt %d/%d)", token, attempt, settings.max_retries)
                continue

            await self._cache_record(record)
            logger.info("Created short URL %r -> %s", record.token, record.original_url)
            return record

        raise DuplicateTokenError(
            f"Could not generate unique token after {settings.max_retries} attempts"
        )

    async def resolve_redirect(self, token: str) -> str:
        """
        Resolve a token to its original URL and count the click.

        Flow:
        1. Check cache first (Cache-Aside Pattern)
        2. On a miss, look the record up in the store and populate the cache
        3. Atomically increment click_count; this also re-checks that the
           record is still live, so a stale cache entry cannot serve a
           deleted or expired link

        Raises:
            URLExpiredError: the record exists but has expired
            URLNotFoundError: no such token
        """
        original_url = None
        if self.cache:
            original_url = await self.cache.get(self._cache_key(token))

        if original_url is None:
            try:
                record = self.store.lookup_by_token(token)
            except URLNotFoundError:
                self._raise_if_expired(token)
                raise
            original_url = record.original_url
            await self._cache_record(record)

        try:
            self.store.increment_clicks(token)
        except URLNotFoundError:
            await self._invalidate(token)
            self._raise_if_expired(token)
            raise

        return original_url

    async def get_url_info(self, token: str) -> URLRecord:
        """Get a record by token, including expired-but-present ones"""
        return self.store.lookup_by_token(token, include_expired=True)

    async def list_urls(
        self,
        limit: int = 100,
        offset: int = 0,
        include_expired: bool = False
    ) -> List[URLRecord]:
        return self.store.list_urls(limit=limit, offset=offset, include_expired=include_expired)

    async def delete_url(self, token: str) -> None:
        """
        Delete a short URL by token (hard delete).
        Also invalidates cache.
        """
        record = self.store.lookup_by_token(token, include_expired=True)
        self.store.delete(record.id)
        await self._invalidate(token)
        logger.info("Deleted short URL %r", token)

    async def sweep_expired(self) -> int:
        """Physically remove expired records, returns how many were removed"""
        return self.store.sweep()

    def _raise_if_expired(self, token: str) -> None:
        try:
            self.store.lookup_by_token(token, include_expired=True)
        except URLNotFoundError:
            return
        raise URLExpiredError(f"Short URL with token '{token}' has expired.")

    async def _cache_record(self, record: URLRecord) -> None:
        """Cache the mapping for at most cache_ttl, never past expires_at"""
        if not self.cache:
            return
        remaining = (record.expires_at - utcnow()).total_seconds()
        ttl = min(settings.cache_ttl, math.floor(remaining))
        if ttl > 0:
            await self.cache.set(self._cache_key(record.token), record.original_url, ttl=ttl)

    async def _invalidate(self, token: str) -> None:
        if self.cache:
            await self.cache.delete(self._cache_key(token))

    @staticmethod
    def _cache_key(token: str) -> str:
        return f"url:{token}"
