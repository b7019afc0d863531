"""Time helpers shared by the store, the service layer and the sweeper.

All timestamps handled by QuickURL are timezone-aware UTC. Naive datetimes
coming from callers (or from JSON payloads without an offset) are taken to
already be in UTC.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Union


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalise ``value`` to an aware UTC datetime.

    Example:
        >>> as_utc(datetime(2025, 1, 1, 12, 0))
        datetime.datetime(2025, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """Return ``now`` normalised to UTC, or the current time when omitted."""
    return utcnow() if now is None else as_utc(now)


def to_timedelta(ttl: Union[timedelta, int, float]) -> timedelta:
    """Accept a TTL either as a timedelta or as a number of seconds."""
    if isinstance(ttl, timedelta):
        return ttl
    return timedelta(seconds=ttl)
