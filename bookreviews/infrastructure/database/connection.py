"""Database connection and session management."""

import logging
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from bookreviews.core.config import settings
from bookreviews.infrastructure.database.models import Base

logger = logging.getLogger(__name__)


def _connect_args(database_url: str) -> dict:
    """Driver-level store timeout: aiosqlite takes ``timeout``, asyncpg ``command_timeout``."""
    backend = make_url(database_url).get_backend_name()
    if backend == "sqlite":
        return {"timeout": settings.db_timeout_seconds}
    if backend == "postgresql":
        return {"command_timeout": settings.db_timeout_seconds}
    return {}


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """Make SQLite enforce ``ForeignKey`` constraints; it ignores them by default."""
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    settings.database_url,
    echo=False,
    future=True,
    connect_args=_connect_args(settings.database_url),
)
enable_sqlite_foreign_keys(engine)
async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session."""
    async with async_session_maker() as session:
        yield session


async def init_db(reset: bool = False) -> None:
    """Initialize database tables.

    With ``reset`` the existing schema is dropped first, leaving an empty store.
    """
    try:
        async with engine.begin() as conn:
            if reset:
                logger.warning("Dropping all tables before schema creation")
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    except Exception:
        safe_url = make_url(settings.database_url).render_as_string(hide_password=True)
        logger.exception("Database initialization failed for %s", safe_url)
        raise


async def close_db() -> None:
    await engine.dispose()
