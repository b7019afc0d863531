from sqlalchemy import Column, Index, Integer, Text

from quickurl.database.connection import Base
from quickurl.database.types import UTCDateTime


class URL(Base):
    """
    Shortened-URL record.

    Rows are inserted once and afterwards only `click_count` changes.
    Whether a record is live is never stored: it is always derived from
    `expires_at` at read time (see URLRecord.is_live_at).
    """
    __tablename__ = "urls"
    __table_args__ = (
        # Point lookup for redirects, ordering for listings, range scan for sweeps
        Index("idx_urls_token", "token"),
        Index("idx_urls_created_at", "created_at"),
        Index("idx_urls_expires_at", "expires_at"),
    )

    id = Column(Text, primary_key=True)
    token = Column(Text, unique=True, nullable=False)
    original_url = Column(Text, nullable=False)
    title = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, nullable=False)
    expires_at = Column(UTCDateTime, nullable=False)
    click_count = Column(Integer, nullable=False, default=0, server_default="0")

    def __repr__(self) -> str:
        return f"<URL id={self.id!r} token={self.token!r}>"
