"""
FastQuery - Pagination, filtering and sorting for FastAPI applications.

This package turns the untyped query string of a list endpoint into a
whitelisted query against a SQLAlchemy model and wraps the result in a
response envelope with pagination metadata and navigation links.

Usage:
    from fastapi import Depends, FastAPI
    from fastquery.api import get_query_request
    from fastquery.db import PaginatedRepository, get_db
    from fastquery.factory import configure_app

    app = FastAPI()
    configure_app(app)

    @app.get("/events")
    async def list_events(query=Depends(get_query_request), db=Depends(get_db)):
        result = await PaginatedRepository(Event, db).paginate(query)
        return result.to_dict()
"""

__version__ = "0.1.0"

# Public API exports
from fastquery.config import BaseAppSettings, get_settings
from fastquery.errors import AppError, setup_errors
from fastquery.factory import configure_app
from fastquery.logging import get_logger
from fastquery.pagination import (
    QueryBuilder,
    QueryConfig,
    QueryRequest,
    build_response,
    parse_query_params,
)
from fastquery.schemas import ErrorResponse, QueryResult
