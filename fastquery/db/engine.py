"""
Database engine and session management for FastAPI applications.
"""

from typing import Optional

from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fastquery.config.base import BaseAppSettings
from fastquery.errors.exceptions import DBError
from fastquery.logging import Logger, ensure_logger

# Module-level engine and session factory
engine: Optional[AsyncEngine] = None
SessionLocal: Optional[async_sessionmaker[AsyncSession]] = None


async def init_db(settings: BaseAppSettings, logger: Optional[Logger] = None) -> None:
    """
    Initialize the database engine and session factory.

    Args:
        settings: Application settings
        logger: Optional logger for database operations

    Raises:
        DBError: If no DATABASE_URL is configured
    """
    global engine, SessionLocal

    log = ensure_logger(logger, __name__, settings)

    if not settings.DATABASE_URL:
        raise DBError(message="DATABASE_URL is not configured")

    url = make_url(settings.DATABASE_URL)
    log.debug(f"Creating database engine for {url.render_as_string(hide_password=True)}")

    engine_kwargs = {
        "echo": settings.DB_ECHO,
    }
    # SQLite+aiosqlite does not use a sized connection pool
    if url.get_backend_name() != "sqlite":
        engine_kwargs["pool_size"] = settings.DB_POOL_SIZE

    engine = create_async_engine(settings.DATABASE_URL, **engine_kwargs)
    SessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False)
    log.debug("Database engine and session factory initialized")


async def shutdown_db(logger: Optional[Logger] = None) -> None:
    """
    Dispose of the database engine.

    Args:
        logger: Optional logger for database operations
    """
    global engine, SessionLocal

    log = ensure_logger(logger, __name__)

    if engine:
        log.debug("Disposing database engine")
        await engine.dispose()
        engine = None
        SessionLocal = None
        log.debug("Database engine disposed")
