"""
URL record store strategies using Strategy Pattern.

Allows switching the persistence substrate without touching the service layer:
- SQLAlchemy: durable store on SQLite/PostgreSQL (default)
- In-memory: thread-safe dictionaries, for development and tests

Both honour the same contract:
- Token uniqueness is checked atomically with insertion
- Click increments are atomic (no lost updates)
- Expiry is logical deletion for public lookups, computed at read time
- Sweeps only ever remove records whose expires_at <= now
"""

import bisect
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple, Union

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from quickurl.exceptions import DuplicateTokenError, InvalidInputError, URLNotFoundError
from quickurl.models.url import URL
from quickurl.schemas.url import URLRecord
from quickurl.store.helpers import handle_storage_errors
from quickurl.utils.helpers import resolve_now, to_timedelta

logger = logging.getLogger(__name__)

TTL = Union[timedelta, int, float]


class URLStoreStrategy(ABC):
    """
    Abstract base class for URL record stores.

    Every method that consults the clock takes an optional `now`
    (defaults to the current UTC time) so callers and tests can
    evaluate expiry at an explicit instant.

    Pattern: Strategy Pattern
    Similar to: Django's cache backends, Celery's brokers
    """

    @abstractmethod
    def create(
        self,
        token: str,
        original_url: str,
        ttl: TTL,
        title: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> URLRecord:
        """
        Insert a new record expiring at `now + ttl`.

        Args:
            token: Public lookup key, must not be taken
            original_url: Redirect target, non-empty
            ttl: Positive timedelta or number of seconds
            title: Optional title
            now: Creation time

        Returns:
            The stored record (click_count = 0)

        Raises:
            InvalidInputError: empty token/original_url or non-positive ttl
            DuplicateTokenError: the token already exists
            StorageUnavailableError: the backend cannot be reached
        """
        pass

    @abstractmethod
    def lookup_by_token(
        self,
        token: str,
        now: Optional[datetime] = None,
        include_expired: bool = False
    ) -> URLRecord:
        """
        Get a record by token.

        Expired records are reported as missing unless `include_expired`
        is set (administrative lookups).

        Raises:
            URLNotFoundError: absent, or expired and not included
        """
        pass

    @abstractmethod
    def lookup_by_id(
        self,
        record_id: str,
        now: Optional[datetime] = None,
        include_expired: bool = False
    ) -> URLRecord:
        """Get a record by id, same expiry policy as lookup_by_token"""
        pass

    @abstractmethod
    def increment_clicks(self, token: str, now: Optional[datetime] = None) -> int:
        """
        Atomically add one click to a live record.

        Returns:
            The click count after the increment

        Raises:
            URLNotFoundError: the token does not resolve to a live record
        """
        pass

    @abstractmethod
    def sweep(self, now: Optional[datetime] = None) -> int:
        """
        Delete every record with expires_at <= now.

        Returns:
            Number of records removed (0 when nothing was expired)
        """
        pass

    @abstractmethod
    def delete(self, record_id: str) -> None:
        """
        Delete a record regardless of expiry.

        Raises:
            URLNotFoundError: no record has this id
        """
        pass

    @abstractmethod
    def list_urls(
        self,
        limit: int = 100,
        offset: int = 0,
        include_expired: bool = False,
        now: Optional[datetime] = None
    ) -> List[URLRecord]:
        """Records ordered by created_at, newest first"""
        pass

    @staticmethod
    def _validate_new_record(token: str, original_url: str, ttl: TTL, created_at: datetime) -> datetime:
        """Check create() inputs and return the expiry instant"""
        if not token or not token.strip():
            raise InvalidInputError("Token must not be empty.")
        if not original_url or not original_url.strip():
            raise InvalidInputError("Original URL must not be empty.")

        try:
            ttl = to_timedelta(ttl)
            if ttl <= timedelta(0):
                raise InvalidInputError(f"TTL must be positive, got {ttl.total_seconds()}s.")
            return created_at + ttl
        except (OverflowError, ValueError) as e:
            raise InvalidInputError(f"TTL {ttl!r} is out of range.") from e

    @staticmethod
    def _validate_page(limit: int, offset: int) -> None:
        if limit < 0 or offset < 0:
            raise InvalidInputError("Limit and offset must not be negative.")

    @staticmethod
    def _ensure_visible(
        record: Optional[URLRecord],
        now: datetime,
        include_expired: bool,
        description: str
    ) -> URLRecord:
        if record is None:
            raise URLNotFoundError(f"Short URL with {description} not found.")
        if not include_expired and record.is_expired_at(now):
            raise URLNotFoundError(f"Short URL with {description} has expired.")
        return record


class SQLAlchemyURLStore(URLStoreStrategy):
    """
    SQLAlchemy implementation backed by the `urls` table.

    Each operation runs in its own session and transaction:
    - create: the UNIQUE constraint on token makes check-and-insert atomic
    - increment_clicks: one UPDATE click_count = click_count + 1, guarded by
      expires_at > now, then a read of the new value in the same transaction
    - sweep: one DELETE guarded by expires_at <= now (expires_at index)

    Use case:
    - Every deployment; SQLite for single-host, PostgreSQL when needed
    """

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize SQL store.

        Args:
            session_factory: sessionmaker bound to a migrated engine
        """
        self.session_factory = session_factory

    @handle_storage_errors
    def create(
        self,
        token: str,
        original_url: str,
        ttl: TTL,
        title: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> URLRecord:
        created_at = resolve_now(now)
        expires_at = self._validate_new_record(token, original_url, ttl, created_at)
        url = URL(
            id=str(uuid.uuid4()),
            token=token,
            original_url=original_url,
            title=title,
            created_at=created_at,
            expires_at=expires_at,
            click_count=0,
        )

        try:
            with self.session_factory.begin() as session:
                session.add(url)
                session.flush()
                record = URLRecord.model_validate(url)
        except IntegrityError as e:
            raise DuplicateTokenError(f"Short URL with token '{token}' already exists.") from e

        logger.debug("Created record %s for token %r", record.id, token)
        return record

    @handle_storage_errors
    def lookup_by_token(
        self,
        token: str,
        now: Optional[datetime] = None,
        include_expired: bool = False
    ) -> URLRecord:
        with self.session_factory() as session:
            url = session.scalars(select(URL).where(URL.token == token)).first()
            record = URLRecord.model_validate(url) if url else None

        return self._ensure_visible(record, resolve_now(now), include_expired, f"token '{token}'")

    @handle_storage_errors
    def lookup_by_id(
        self,
        record_id: str,
        now: Optional[datetime] = None,
        include_expired: bool = False
    ) -> URLRecord:
        with self.session_factory() as session:
            url = session.get(URL, record_id)
            record = URLRecord.model_validate(url) if url else None

        return self._ensure_visible(record, resolve_now(now), include_expired, f"id '{record_id}'")

    @handle_storage_errors
    def increment_clicks(self, token: str, now: Optional[datetime] = None) -> int:
        now = resolve_now(now)
        with self.session_factory.begin() as session:
            result = session.execute(
                update(URL)
                .where(URL.token == token, URL.expires_at > now)
                .values(click_count=URL.click_count + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise URLNotFoundError(f"No live short URL with token '{token}'.")

            # Still inside the transaction that holds the row's write lock
            return session.scalar(select(URL.click_count).where(URL.token == token))

    @handle_storage_errors
    def sweep(self, now: Optional[datetime] = None) -> int:
        now = resolve_now(now)
        with self.session_factory.begin() as session:
            result = session.execute(
                delete(URL)
                .where(URL.expires_at <= now)
                .execution_options(synchronize_session=False)
            )
            removed = result.rowcount

        logger.debug("Sweep at %s removed %d records", now.isoformat(), removed)
        return removed

    @handle_storage_errors
    def delete(self, record_id: str) -> None:
        with self.session_factory.begin() as session:
            result = session.execute(
                delete(URL)
                .where(URL.id == record_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise URLNotFoundError(f"Short URL with id '{record_id}' not found.")

    @handle_storage_errors
    def list_urls(
        self,
        limit: int = 100,
        offset: int = 0,
        include_expired: bool = False,
        now: Optional[datetime] = None
    ) -> List[URLRecord]:
        self._validate_page(limit, offset)
        stmt = select(URL).order_by(URL.created_at.desc(), URL.id.desc())
        if not include_expired:
            stmt = stmt.where(URL.expires_at > resolve_now(now))

        with self.session_factory() as session:
            urls = session.scalars(stmt.limit(limit).offset(offset)).all()
            return [URLRecord.model_validate(url) for url in urls]


class InMemoryURLStore(URLStoreStrategy):
    """
    In-memory implementation using Python dicts and sorted lists.

    Access paths mirror the SQL indexes:
    - token -> id and id -> record hash maps (point lookups)
    - (created_at, id) sorted list (listing)
    - (expires_at, id) sorted list (bisect range scan for sweeps)

    A single lock guards all structures; every critical section is
    constant time or logarithmic apart from list splicing. Increments on
    different tokens share that lock but hold it only for two dict
    operations, with no I/O. Per-record isolation is the SQL store's job.

    Cons:
    - Lost on restart
    - Not shared between processes

    Used in development/testing environments.
    """

    def __init__(self):
        """Initialize empty in-memory store"""
        self._lock = threading.Lock()
        self._records: Dict[str, URLRecord] = {}
        self._ids_by_token: Dict[str, str] = {}
        self._by_created: List[Tuple[datetime, str]] = []
        self._by_expiry: List[Tuple[datetime, str]] = []

    def create(
        self,
        token: str,
        original_url: str,
        ttl: TTL,
        title: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> URLRecord:
        created_at = resolve_now(now)
        expires_at = self._validate_new_record(token, original_url, ttl, created_at)
        record = URLRecord(
            id=str(uuid.uuid4()),
            token=token,
            original_url=original_url,
            title=title,
            created_at=created_at,
            expires_at=expires_at,
            click_count=0,
        )

        with self._lock:
            if token in self._ids_by_token:
                raise DuplicateTokenError(f"Short URL with token '{token}' already exists.")
            self._records[record.id] = record
            self._ids_by_token[token] = record.id
            bisect.insort(self._by_created, (record.created_at, record.id))
            bisect.insort(self._by_expiry, (record.expires_at, record.id))

        logger.debug("Created record %s for token %r", record.id, token)
        return record

    def lookup_by_token(
        self,
        token: str,
        now: Optional[datetime] = None,
        include_expired: bool = False
    ) -> URLRecord:
        with self._lock:
            record_id = self._ids_by_token.get(token)
            record = self._records.get(record_id) if record_id else None

        return self._ensure_visible(record, resolve_now(now), include_expired, f"token '{token}'")

    def lookup_by_id(
        self,
        record_id: str,
        now: Optional[datetime] = None,
        include_expired: bool = False
    ) -> URLRecord:
        with self._lock:
            record = self._records.get(record_id)

        return self._ensure_visible(record, resolve_now(now), include_expired, f"id '{record_id}'")

    def increment_clicks(self, token: str, now: Optional[datetime] = None) -> int:
        now = resolve_now(now)
        with self._lock:
            record_id = self._ids_by_token.get(token)
            record = self._records.get(record_id) if record_id else None
            if record is None or record.is_expired_at(now):
                raise URLNotFoundError(f"No live short URL with token '{token}'.")

            updated = record.model_copy(update={"click_count": record.click_count + 1})
            self._records[record_id] = updated
            return updated.click_count

    def sweep(self, now: Optional[datetime] = None) -> int:
        now = resolve_now(now)
        with self._lock:
            cut = bisect.bisect_right(self._by_expiry, now, key=lambda item: item[0])
            expired = self._by_expiry[:cut]
            del self._by_expiry[:cut]
            for _, record_id in expired:
                record = self._records.pop(record_id)
                del self._ids_by_token[record.token]
                self._remove_sorted(self._by_created, (record.created_at, record_id))

        logger.debug("Sweep at %s removed %d records", now.isoformat(), len(expired))
        return len(expired)

    def delete(self, record_id: str) -> None:
        with self._lock:
            record = self._records.pop(record_id, None)
            if record is None:
                raise URLNotFoundError(f"Short URL with id '{record_id}' not found.")
            del self._ids_by_token[record.token]
            self._remove_sorted(self._by_created, (record.created_at, record_id))
            self._remove_sorted(self._by_expiry, (record.expires_at, record_id))

    def list_urls(
        self,
        limit: int = 100,
        offset: int = 0,
        include_expired: bool = False,
        now: Optional[datetime] = None
    ) -> List[URLRecord]:
        self._validate_page(limit, offset)
        now = resolve_now(now)
        with self._lock:
            records = [self._records[record_id] for _, record_id in reversed(self._by_created)]

        if not include_expired:
            records = [record for record in records if record.is_live_at(now)]
        return records[offset:offset + limit]

    @staticmethod
    def _remove_sorted(items: List[Tuple[datetime, str]], item: Tuple[datetime, str]) -> None:
        index = bisect.bisect_left(items, item)
        if index < len(items) and items[index] == item:
            del items[index]
