"""Async SQLAlchemy engine, session factory, and base model."""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from remote_orchestration.config import settings


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


def configure_sqlite(engine: AsyncEngine) -> None:
    """Turn on FK enforcement and SAVEPOINT-safe transactions for SQLite engines.

    pysqlite/aiosqlite manage BEGIN themselves, which breaks nested
    transactions; hand that back to SQLAlchemy.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # noqa: ARG001
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str) -> AsyncEngine:
    """Create the async engine for *url*; pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        sqlite_engine = create_async_engine(url, echo=settings.db_echo)
        configure_sqlite(sqlite_engine)
        return sqlite_engine
    return create_async_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        echo=settings.db_echo,
    )


engine = build_engine(settings.database_url)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """FastAPI dependency — yields a DB session and commits after the request."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
