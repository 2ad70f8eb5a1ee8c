"""Paginated, filtered list reads shared by every repository."""

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from sqlalchemy import Row, Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from src.jobboard.domain.pagination import ListQuery, PaginatedResult
from src.jobboard.repositories.errors import StoreReadError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ListQueryExecutor:
    """Runs the count and page fetch behind every list endpoint.

    The count and the fetch are two independent reads. They are not
    wrapped in a transaction, so a concurrent write may make ``total``
    and ``items`` disagree slightly.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def fetch_page(
        self,
        *,
        statement: Select,
        query: ListQuery,
        filter_columns: Mapping[str, InstrumentedAttribute[Any]],
        order_column: InstrumentedAttribute[Any],
        id_column: InstrumentedAttribute[Any],
        to_item: Callable[[Row], T],
    ) -> PaginatedResult[T]:
        """Fetch one page of rows matching ``query.filters``.

        Args:
            statement: Base SELECT producing the list projection
            query: Resolved page, limit and equality filters
            filter_columns: Filter name to the column it constrains.
                Filters with no entry are ignored.
            order_column: Timestamp column; rows come back newest first
            id_column: Primary key column, used as the tie-breaker
            to_item: Converts one result row to the item model

        Returns:
            PaginatedResult with ``total`` counted across every matching row

        Raises:
            StoreReadError: If either read fails
        """
        predicates = [
            filter_columns[name] == value
            for name, value in sorted(query.filters.items())
            if name in filter_columns
        ]

        count_statement = select(func.count(id_column)).where(*predicates)
        page_statement = (
            statement.where(*predicates)
            .order_by(order_column.desc(), id_column.desc())
            .offset(query.offset)
            .limit(query.limit)
        )

        try:
            total = (await self._session.execute(count_statement)).scalar_one()
            rows = (await self._session.execute(page_statement)).all()
        except SQLAlchemyError as e:
            logger.error("List read on %s failed: %s", id_column.class_.__name__, e)
            raise StoreReadError() from e

        return PaginatedResult.build([to_item(row) for row in rows], total, query)
