"""
Engine and session construction for the URL record database.

Every store operation opens its own short-lived session from `SessionLocal`
(or from a sessionmaker built on a custom engine in tests), so sessions are
never shared between threads.
"""

from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from quickurl.config import settings


Base = declarative_base()


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    """WAL lets lookups proceed while a writer holds the lock"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_db_engine(
    database_url: Optional[str] = None,
    busy_timeout: Optional[float] = None
) -> Engine:
    """
    Create a SQLAlchemy engine for the URL record database.

    For SQLite the connection is shared-thread safe and waits at most
    `busy_timeout` seconds for a competing writer instead of blocking forever.
    In-memory SQLite URLs give each thread its own database and are not
    suitable for the SQL store.

    Args:
        database_url: SQLAlchemy URL (defaults to settings.database_url)
        busy_timeout: Lock wait in seconds (defaults to settings.db_busy_timeout)
    """
    database_url = database_url or settings.database_url
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,
            "timeout": busy_timeout if busy_timeout is not None else settings.db_busy_timeout,
        }

    engine = create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


engine = create_db_engine()
SessionLocal = sessionmaker(autoflush=False, bind=engine)
