# projects_api/migrate.py
# Database migrations for PostgreSQL and SQLite
# Run: python -m projects_api.migrate

import logging

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

from projects_api.db import connection, create_engine_for

log = logging.getLogger(__name__)


def run_migrations(engine: Engine) -> None:
    """
    Run all database migrations (idempotent).
    Creates tables and indexes if missing. Safe to run multiple times.
    """
    log.info("[MIGRATE] Starting database migrations...")

    with connection(engine) as conn:
        if engine.dialect.name == "postgresql":
            _run_postgres_migrations(conn)
        else:
            _run_sqlite_migrations(conn)
        _create_indexes(conn)

    log.info("[MIGRATE] All migrations complete")


def _run_postgres_migrations(conn: Connection) -> None:
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            password_hash TEXT NOT NULL,
            role TEXT NOT NULL DEFAULT 'user',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """))
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS projects (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT,
            status TEXT NOT NULL DEFAULT 'todo',
            owner_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE ON UPDATE CASCADE,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """))


def _run_sqlite_migrations(conn: Connection) -> None:
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS users (
            id TEXT NOT NULL PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            password_hash TEXT NOT NULL,
            role TEXT NOT NULL DEFAULT 'user',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """))
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS projects (
            id TEXT NOT NULL PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT,
            status TEXT NOT NULL DEFAULT 'todo',
            owner_id TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (owner_id) REFERENCES users (id) ON DELETE CASCADE ON UPDATE CASCADE
        )
    """))


def _create_indexes(conn: Connection) -> None:
    conn.execute(text("CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email_unique ON users(email)"))
    conn.execute(text(
        "CREATE INDEX IF NOT EXISTS idx_projects_owner_created ON projects(owner_id, created_at)"
    ))
    conn.execute(text("CREATE INDEX IF NOT EXISTS idx_projects_created ON projects(created_at)"))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_migrations(create_engine_for())
