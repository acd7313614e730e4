"""
API utilities for FastAPI applications.

This module provides the dependencies that turn a request's query string
into a QueryRequest for the pagination engine.
"""

from fastquery.api.dependencies import QueryRequestDependency, get_query_request

__all__ = ["get_query_request", "QueryRequestDependency"]
