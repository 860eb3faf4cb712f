# projects_api/db.py
# Database abstraction layer supporting PostgreSQL (production) and SQLite (dev)

import logging
from contextlib import contextmanager
from typing import Generator, Optional
from urllib.parse import urlparse

from sqlalchemy import create_engine, event, pool
from sqlalchemy.engine import Connection, Engine

from projects_api.config import DATABASE_URL

log = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for(url: Optional[str] = None) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL (defaults to DATABASE_URL).

    PostgreSQL gets a pooled engine with pre-ping; SQLite gets a
    thread-tolerant connection with foreign keys enforced.
    """
    url = url or DATABASE_URL

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=pool.NullPool,
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        log.info("[DB] Using SQLite (%s)", url)
        return engine

    if url.startswith("postgres://"):
        # Managed hosts still hand out the legacy scheme
        url = "postgresql://" + url[len("postgres://"):]

    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Invalid DATABASE_URL: {url[:20]}...")

    engine = create_engine(
        url,
        poolclass=pool.QueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )
    log.info("[DB] Using %s (%s)", parsed.scheme, parsed.hostname)
    return engine


@contextmanager
def connection(engine: Engine) -> Generator[Connection, None, None]:
    """
    Context manager for a transactional connection.
    Commits on clean exit, rolls back if the block raises.
    """
    with engine.begin() as conn:
        yield conn
