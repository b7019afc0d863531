"""
Idempotent schema migration for the `urls` table.

Safe to run on every start-up: the table is created only when missing and
each index is created with IF NOT EXISTS, so existing objects are left
untouched.
"""

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.schema import CreateIndex

from quickurl.database.connection import Base
from quickurl.models.url import URL

logger = logging.getLogger(__name__)


def apply_migrations(engine: Engine) -> None:
    """Create the urls table and its token/created_at/expires_at indexes"""
    table = URL.__table__
    with engine.begin() as conn:
        Base.metadata.create_all(bind=conn, tables=[table], checkfirst=True)
        for index in sorted(table.indexes, key=lambda idx: idx.name):
            conn.execute(CreateIndex(index, if_not_exists=True))

    logger.info("Schema for table %r is up to date", table.name)
