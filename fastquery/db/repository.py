import copy
import logging
from typing import Any, Callable, Generic, List, Optional, Tuple, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from fastquery.db.store import SQLAlchemyStore
from fastquery.errors.exceptions import DBError, NotFoundError
from fastquery.pagination.builder import QueryBuilder
from fastquery.pagination.config import QueryConfig
from fastquery.pagination.request import QueryRequest
from fastquery.pagination.response import build_response
from fastquery.schemas.response.list import QueryResult

ModelType = TypeVar("ModelType")


class PaginatedRepository(Generic[ModelType]):
    """
    Repository serving paginated, filtered and sorted lists of a model.

    Attributes:
        model: Mapped model class (with an integer ``id`` column)
        session: Async session owned by the caller
        config: Query configuration used when ``paginate`` is given none

    Example:
        ```python
        class EventRepository(PaginatedRepository[Event]):
            config = QueryConfig(
                allowed_filter_fields={"status", "price"},
                allowed_sort_fields={"name", "created_at"},
                searchable_columns=("name", "description"),
            )

        result = await EventRepository(Event, session).paginate(request)
        ```
    """

    config: QueryConfig = QueryConfig()

    def __init__(
        self,
        model: Type[ModelType],
        session: AsyncSession,
        config: Optional[QueryConfig] = None,
    ) -> None:
        self.model = model
        self.session = session
        if config is not None:
            self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    def store(self) -> SQLAlchemyStore:
        """Base store every query starts from; override to add fixed scopes."""
        return SQLAlchemyStore(self.model, logger=self.logger)

    async def get_by_id(self, id: Any) -> ModelType:
        """Retrieve a single record by primary key."""
        try:
            instance: Optional[ModelType] = await self.session.get(self.model, id)
            if instance is None:
                raise NotFoundError(resource_type=self.model.__name__, resource_id=id)
            self.logger.debug(f"Fetched {self.model.__name__} id={id}")
            return instance
        except NotFoundError:
            raise
        except Exception as e:
            self.logger.error(f"Error in get_by_id: {e}")
            raise DBError(message=str(e), details={"error": str(e)})

    async def find_page(
        self, request: QueryRequest, config: Optional[QueryConfig] = None
    ) -> Tuple[List[ModelType], Optional[int]]:
        """
        Run the count and data queries for a request.

        The count query is skipped for cursor requests that do not ask for
        a total.

        Returns:
            ``(items, total)``; total is None when the count was skipped
        """
        config = config or self.config
        count_query, data_query = QueryBuilder(config, self.logger).build(request)

        try:
            total = None
            if not request.is_cursor_based or request.include_total:
                total = await count_query(self.store()).count(self.session)
            items = await data_query(self.store()).find(self.session)
        except Exception as e:
            self.logger.error(f"Error in paginate: {e}")
            raise DBError(message=str(e), details={"error": str(e)})

        self.logger.debug(
            f"Paginated {len(items)} items of {self.model.__name__} (total={total})"
        )
        return items, total

    async def paginate(
        self,
        request: QueryRequest,
        config: Optional[QueryConfig] = None,
        serializer: Optional[Callable[[ModelType], Any]] = None,
    ) -> QueryResult:
        """
        Fetch one page and wrap it in a QueryResult envelope.

        Args:
            request: Parsed request; a normalized copy is used, the caller's
                request is left unchanged
            config: Overrides the repository configuration
            serializer: Converts each model instance for the response data

        Returns:
            The response envelope

        Raises:
            DBError: If the count or data query fails
        """
        config = config or self.config
        request = copy.copy(request).validate(config)

        items, total = await self.find_page(request, config)

        first_id = getattr(items[0], "id", 0) if items else 0
        last_id = getattr(items[-1], "id", 0) if items else 0
        data = [serializer(item) for item in items] if serializer else items

        meta = None
        if request.is_cursor_based and total is not None:
            meta = {"total_items": total}

        return build_response(
            data,
            request,
            total or 0,
            len(items),
            first_id,
            last_id,
            meta=meta,
        )
