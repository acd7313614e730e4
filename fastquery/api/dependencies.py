"""
FastAPI dependencies for paginated list endpoints.

Both dependencies read the raw query string rather than declaring Query
parameters, because filter keys (``price[gte]``) are open-ended.
"""

from typing import Optional

from fastapi import Request

from fastquery.pagination.config import QueryConfig
from fastquery.pagination.parser import parse_query_params
from fastquery.pagination.request import QueryRequest


def get_query_request(request: Request) -> QueryRequest:
    """
    Parse the current request's query string with default limits.

    Example:
        ```python
        @app.get("/events")
        async def list_events(
            query: QueryRequest = Depends(get_query_request),
            db: AsyncSession = Depends(get_db),
        ):
            result = await EventRepository(Event, db).paginate(query)
            return result.to_dict()
        ```
    """
    return parse_query_params(request.query_params, request.url.path)


class QueryRequestDependency:
    """
    Query string parser bound to a resource's QueryConfig.

    Example:
        ```python
        events_query = QueryRequestDependency(
            QueryConfig(default_page_size=10, max_page_size=50)
        )

        @app.get("/events")
        async def list_events(query: QueryRequest = Depends(events_query)):
            ...
        ```
    """

    def __init__(self, config: Optional[QueryConfig] = None):
        self.config = config

    def __call__(self, request: Request) -> QueryRequest:
        return parse_query_params(request.query_params, request.url.path, self.config)
