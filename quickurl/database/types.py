from datetime import timezone

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from quickurl.utils.helpers import as_utc


class UTCDateTime(TypeDecorator):
    """
    DATETIME column holding naive UTC, surfaced as aware UTC datetimes.

    SQLite has no timezone support, so values are normalised to UTC before
    binding. The fixed textual format keeps range comparisons on the column
    (expiry sweeps, listing order) correct.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return as_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)
