"""
Idea Board – Async SQLAlchemy engine, session, and declarative base.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from ideaboard.config import settings


def enable_sqlite_integrity(engine: AsyncEngine) -> None:
    """
    Turn on foreign keys and hand transaction control to SQLAlchemy.

    pysqlite/aiosqlite defer BEGIN on their own, which breaks SAVEPOINT and
    lets partial work escape a rollback. Emitting BEGIN ourselves fixes both.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine, applying the SQLite hooks when needed."""
    kwargs.setdefault("echo", settings.DEBUG)
    kwargs.setdefault("future", True)

    # PgBouncer (transaction mode) does not support prepared statement caching.
    if "postgresql" in url:
        kwargs.setdefault("connect_args", {"statement_cache_size": 0})

    new_engine = create_async_engine(url, **kwargs)
    if url.startswith("sqlite"):
        enable_sqlite_integrity(new_engine)
    return new_engine


# ── Engine ──
engine = build_engine(settings.DATABASE_URL)

# ── Session factory ──
async_session = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Declarative base ──
class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


# ── Dependency for FastAPI routes ──
async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async database session, auto-closed on exit."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
