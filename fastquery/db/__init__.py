"""
Database integration module for FastQuery: public API

Features:
- Async SQLAlchemy integration (PostgreSQL+asyncpg or SQLite+aiosqlite)
- SQLAlchemy store for the pagination query engine
- Paginated repository returning QueryResult envelopes
- FastAPI dependency for session access
- Lifecycle management for FastAPI apps

Limitations:
- Only async SQLAlchemy sessions are used for execution
- No migration helpers (Alembic integration not included)
- Cursor pagination requires an integer ``id`` column
"""

from fastquery.db.base import Base, BaseModel, metadata
from fastquery.db.engine import init_db, shutdown_db
from fastquery.db.manager import get_db, setup_db
from fastquery.db.repository import PaginatedRepository
from fastquery.db.store import SQLAlchemyStore, coerce_value, escape_like

__all__ = [
    "init_db",
    "shutdown_db",
    "setup_db",
    "get_db",
    "Base",
    "BaseModel",
    "metadata",
    "SQLAlchemyStore",
    "PaginatedRepository",
    "coerce_value",
    "escape_like",
]
