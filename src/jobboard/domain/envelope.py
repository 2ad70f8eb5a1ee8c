"""Uniform success/error response envelope.

Every route returns one of two shapes, discriminated by ``success``::

    {"success": true,  "message": ..., "data": ..., "meta": ...}
    {"success": false, "message": ..., "error": ..., "details": [...]}

List endpoints put ``{"items": [...], "pagination": {...}}`` under ``data``.
"""

import time
from typing import Any, Generic, Literal, TypeVar

from pydantic import Field

from src.jobboard.domain.base import CamelModel
from src.jobboard.domain.pagination import PaginatedResult

T = TypeVar("T")


class ErrorCode:
    """Machine-readable values for ``ErrorEnvelope.error``."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFLICT = "CONFLICT"
    HTTP_ERROR = "HTTP_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class PaginationMeta(CamelModel):
    """Pagination block of a list response."""

    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)


class ListPayload(CamelModel, Generic[T]):
    """``data`` payload of a list response."""

    items: list[T]
    pagination: PaginationMeta


class ResponseMeta(CamelModel):
    """Request metadata attached by cache-instrumented endpoints."""

    cached: bool = Field(description="Whether the data was served from the cache")
    response_time_ms: float = Field(ge=0, description="Server-side handling time")
    ttl_seconds: int | None = Field(
        default=None,
        description="Cache time-to-live applied to the data",
    )

    @classmethod
    def since(
        cls, started: float, cached: bool, ttl_seconds: int | None = None
    ) -> "ResponseMeta":
        """Build metadata for a request timed from ``started`` (a perf_counter value)."""
        elapsed_ms = (time.perf_counter() - started) * 1000
        return cls(
            cached=cached,
            response_time_ms=round(max(elapsed_ms, 0.0), 3),
            ttl_seconds=ttl_seconds,
        )


class SuccessEnvelope(CamelModel, Generic[T]):
    """Envelope for successful responses."""

    success: Literal[True] = True
    message: str | None = None
    data: T | None = None
    meta: ResponseMeta | None = None


class FieldError(CamelModel):
    """A single field-level validation failure."""

    field: str
    message: str


class ErrorEnvelope(CamelModel):
    """Envelope for failed responses."""

    success: Literal[False] = False
    message: str
    error: str
    details: list[FieldError] | None = None


class CacheInvalidation(CamelModel):
    """``data`` payload of a cache invalidation response."""

    deleted_keys: int = Field(ge=0)


class DeletedResource(CamelModel):
    """``data`` payload of a delete response."""

    id: str


def success_response(
    data: Any = None,
    message: str | None = None,
    meta: ResponseMeta | None = None,
) -> SuccessEnvelope:
    """Wrap a payload in the success envelope."""
    return SuccessEnvelope(message=message, data=data, meta=meta)


def list_response(
    result: PaginatedResult,
    message: str | None = None,
    meta: ResponseMeta | None = None,
) -> SuccessEnvelope:
    """Wrap a paginated result in the success envelope.

    Args:
        result: Page of items with totals
        message: Optional human-readable message
        meta: Optional request metadata (cache status, timing)

    Returns:
        Envelope with ``data = {items, pagination}``
    """
    payload = ListPayload(
        items=result.items,
        pagination=PaginationMeta(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )
    return SuccessEnvelope(message=message, data=payload, meta=meta)


def error_response(
    message: str,
    error: str,
    details: list[FieldError] | None = None,
) -> ErrorEnvelope:
    """Build the error envelope."""
    return ErrorEnvelope(message=message, error=error, details=details)
