"""Database configuration and session management.

Production runs on Postgres through asyncpg. A single-till install (and the
test suite) can point ``DATABASE_URL`` at SQLite instead.
"""

import os
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

DEFAULT_DATABASE_URL = (
    "postgresql+asyncpg://dailyledger:dev_password_change_in_prod@db:5432/dailyledger"
)


def normalize_database_url(url: str | None) -> str:
    """Point plain Postgres URLs at the asyncpg driver. Empty means the dev database."""
    url = (url or "").strip()
    if not url:
        return DEFAULT_DATABASE_URL
    # Hosted Postgres hands out postgres:// or postgresql://
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix):]
    return url


def build_engine(url: str) -> AsyncEngine:
    """Create the async engine for ``url``.

    SQLite connections get foreign keys switched on (the record cascades rely on
    them) and explicit BEGINs so SAVEPOINTs work under pysqlite.
    """
    if not url.startswith("sqlite"):
        return create_async_engine(url, pool_pre_ping=True)

    options = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url:
        options["poolclass"] = StaticPool
    engine = create_async_engine(url, **options)

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


DATABASE_URL = normalize_database_url(os.getenv("DATABASE_URL"))

engine = build_engine(DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Workflows commit themselves; anything left pending when the request
    succeeds is committed here, and an exception rolls it back.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
