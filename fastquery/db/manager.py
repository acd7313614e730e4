"""
Database lifecycle wiring for FastAPI applications.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession

import fastquery.db.engine as db_engine
from fastquery.config.base import BaseAppSettings
from fastquery.db.engine import init_db, shutdown_db
from fastquery.errors.exceptions import AppError, DBError
from fastquery.logging import Logger, ensure_logger


def setup_db(
    app: FastAPI,
    settings: BaseAppSettings,
    logger: Optional[Logger] = None,
) -> None:
    """
    Configure database lifecycle for FastAPI application.

    - On startup: initialize AsyncEngine and sessionmaker
    - On shutdown: dispose engine

    The application's existing lifespan runs inside the database lifespan.
    """
    log = ensure_logger(logger, __name__, settings)
    app_lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def lifespan(app_: FastAPI):
        await init_db(settings, log)
        log.info("Database engine initialized")
        try:
            async with app_lifespan(app_) as state:
                yield state
        finally:
            await shutdown_db(log)
            log.info("Database engine disposed")

    app.router.lifespan_context = lifespan


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The session is committed when the request handler returns and rolled
    back when it raises.
    """
    log = ensure_logger(None, __name__)

    if db_engine.SessionLocal is None:
        raise DBError(message="Database not initialized")

    async with db_engine.SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except AppError:
            await session.rollback()
            raise
        except Exception as e:
            await session.rollback()
            log.error(f"Database session error: {e}")
            raise DBError(message=str(e), details={"error": str(e)})
