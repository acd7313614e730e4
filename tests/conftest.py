"""
Shared fixtures for the FastQuery test suite.

The events resource (``event_model``) is used across store, repository and
integration tests.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy import Boolean, Column, DateTime, Float, String, create_engine
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from fastquery.db.base import BaseModel, metadata
from fastquery.pagination.config import QueryConfig

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class Event(BaseModel):
    __tablename__ = "events"

    name = Column(String(100), nullable=False)
    description = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="active")
    price = Column(Float, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    # Settings read the environment; keep tests isolated from the host
    for name in (
        "APP_ENV",
        "APP_NAME",
        "DEBUG",
        "LOG_LEVEL",
        "LOG_JSON",
        "DATABASE_URL",
        "PAGINATION_DEFAULT_PAGE_SIZE",
        "PAGINATION_MAX_PAGE_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def event_model():
    return Event


@pytest.fixture
def make_events():
    """Factory building events with ids 1..count and increasing created_at."""

    def factory(count, start=1, **overrides):
        events = []
        for i in range(start, start + count):
            values = {
                "id": i,
                "name": f"Event {i:02d}",
                "description": f"Description {i}",
                "status": "active",
                "price": float(i * 10),
                "is_public": True,
                "created_at": BASE_TIME + timedelta(hours=i),
                "updated_at": BASE_TIME + timedelta(hours=i),
            }
            values.update(overrides)
            events.append(Event(**values))
        return events

    return factory


@pytest.fixture
def event_config():
    """Query configuration of the events resource."""
    return QueryConfig(
        allowed_filter_fields={"status", "price", "name", "is_public", "cancelled_at"},
        allowed_sort_fields={"name", "price", "created_at"},
        searchable_columns=("name", "description"),
    )


@pytest.fixture
def sync_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sync_session(sync_engine):
    with Session(sync_engine) as session:
        yield session


@pytest_asyncio.fixture
async def async_session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    session_factory = async_sessionmaker(bind=engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()
