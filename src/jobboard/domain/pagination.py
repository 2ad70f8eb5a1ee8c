"""Pagination models and the page/limit resolver for list endpoints."""

import math
from typing import Generic, TypeVar

from pydantic import Field

from src.jobboard.domain.base import CamelModel

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

# Largest row offset a signed 64-bit store integer can hold
MAX_OFFSET = 2**63 - 1


def _parse_int(raw: str | int | None) -> int | None:
    """Parse a query-string value to int, returning None when not numeric."""
    if raw is None:
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(raw.strip())
    except ValueError:
        return None


def resolve_pagination(
    raw_page: str | int | None,
    raw_limit: str | int | None,
    *,
    default_page: int = DEFAULT_PAGE,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> tuple[int, int]:
    """Normalize raw page/limit query values into a bounded pair.

    Invalid input never raises. Missing or non-numeric values fall back
    to the defaults. Page is clamped to at least 1 and to the last page
    whose offset still fits ``MAX_OFFSET``. A limit below 1 falls back to
    the default and a limit above ``max_limit`` is clamped to it.

    Args:
        raw_page: Raw ``page`` query value
        raw_limit: Raw ``limit`` query value
        default_page: Page used when the raw value is missing or invalid
        default_limit: Limit used when the raw value is missing, invalid or < 1
        max_limit: Upper bound for the limit

    Returns:
        Tuple of (page, limit)
    """
    page = _parse_int(raw_page)
    if page is None or page < 1:
        page = max(1, default_page)
    page = min(page, MAX_OFFSET // max_limit + 1)

    limit = _parse_int(raw_limit)
    if limit is None or limit < 1:
        limit = default_limit
    limit = min(limit, max_limit)

    return page, limit


class ListQuery(CamelModel):
    """Resolved pagination plus equality filters for one list request."""

    page: int = Field(default=DEFAULT_PAGE, ge=1, description="1-indexed page number")
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, description="Maximum items per page")
    filters: dict[str, str] = Field(
        default_factory=dict,
        description="Field name to required value",
    )

    @property
    def offset(self) -> int:
        """Number of leading rows skipped before this page."""
        return (self.page - 1) * self.limit

    @classmethod
    def resolve(
        cls,
        raw_page: str | int | None,
        raw_limit: str | int | None,
        filters: dict[str, str] | None = None,
        *,
        default_page: int = DEFAULT_PAGE,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> "ListQuery":
        """Build a ListQuery from raw query-string values."""
        page, limit = resolve_pagination(
            raw_page,
            raw_limit,
            default_page=default_page,
            default_limit=default_limit,
            max_limit=max_limit,
        )
        return cls(page=page, limit=limit, filters=dict(filters or {}))

    def with_filters(self, filters: dict[str, str]) -> "ListQuery":
        """Return a copy of this query carrying the given filters."""
        return self.model_copy(update={"filters": dict(filters)})


class PaginatedResult(CamelModel, Generic[T]):
    """One page of results plus the totals needed to page through the rest.

    ``total`` counts every matching row regardless of pagination.
    ``total_pages`` is ``ceil(total / limit)``, so an empty result has
    zero pages.
    """

    items: list[T] = Field(description="Page of results, newest first")
    total: int = Field(ge=0, description="Total number of matching items")
    page: int = Field(ge=1, description="Current page number")
    limit: int = Field(ge=1, description="Maximum items per page")
    total_pages: int = Field(ge=0, description="Number of pages available")

    @classmethod
    def build(cls, items: list[T], total: int, query: ListQuery) -> "PaginatedResult[T]":
        """Create a result for ``query`` from fetched items and the total count."""
        return cls(
            items=items,
            total=total,
            page=query.page,
            limit=query.limit,
            total_pages=math.ceil(total / query.limit),
        )
