"""Async database engine and session management.

Configures the SQLAlchemy async engine and provides dependency injection
for database sessions. SQLite URLs share one connection across the
event loop so the in-process database survives between sessions.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from metanoia.core.config import settings


def build_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine with dialect-appropriate pool options.

    Args:
        url: SQLAlchemy async database URL.
        echo: Log emitted SQL.

    Returns:
        Configured AsyncEngine.
    """
    engine_kwargs: dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"timeout": 30, "check_same_thread": False}
        engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_pre_ping"] = True

    engine = create_async_engine(url, **engine_kwargs)
    if url.startswith("sqlite"):
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    """Turn on FK enforcement so ON DELETE CASCADE works under SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = build_engine(
    settings.database_url,
    echo=settings.environment == "development" and settings.log_level == "DEBUG",
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
