"""Centralized exception handlers for the FastAPI application.

Maps domain exceptions raised by services, framework errors (unknown
route, bad method, request validation) and unexpected failures to the
error envelope::

    {"success": false, "message": ..., "error": "NOT_FOUND", "details": null}

In production the message is a fixed text per error code; elsewhere the
exception message is returned. Tracebacks are only ever logged.

Usage in main.py:
    from src.jobboard.api.exception_handlers import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.jobboard.api.auth import AuthenticationError, AuthorizationError
from src.jobboard.config import Settings, get_settings
from src.jobboard.domain.envelope import ErrorCode, FieldError, error_response
from src.jobboard.repositories.errors import StoreError
from src.jobboard.services.application_service import (
    ApplicationExistsError,
    ApplicationNotFoundError,
    ApplicationValidationError,
)
from src.jobboard.services.job_service import (
    JobNotFoundError,
    JobOwnershipError,
    JobValidationError,
)
from src.jobboard.services.user_service import (
    UserExistsError,
    UserNotFoundError,
    UserValidationError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Mapping: exception class -> HTTP status code and error code
#
# "Not found" errors     -> 404 NOT_FOUND
# "Validation" errors    -> 400 VALIDATION_ERROR
# "Already exists"       -> 409 CONFLICT
# Missing credentials    -> 401 AUTHENTICATION_ERROR
# Bad token / not owner  -> 403 AUTHORIZATION_ERROR
# Store failures         -> 500 DATABASE_ERROR
# ---------------------------------------------------------------------------

_NOT_FOUND_EXCEPTIONS: list[type[Exception]] = [
    UserNotFoundError,
    JobNotFoundError,
    ApplicationNotFoundError,
]

_BAD_REQUEST_EXCEPTIONS: list[type[Exception]] = [
    UserValidationError,
    JobValidationError,
    ApplicationValidationError,
]

_CONFLICT_EXCEPTIONS: list[type[Exception]] = [
    UserExistsError,
    ApplicationExistsError,
]

_FORBIDDEN_EXCEPTIONS: list[type[Exception]] = [
    AuthorizationError,
    JobOwnershipError,
]

_PRODUCTION_MESSAGES = {
    ErrorCode.VALIDATION_ERROR: "Invalid request",
    ErrorCode.AUTHENTICATION_ERROR: "Authentication required",
    ErrorCode.AUTHORIZATION_ERROR: "Access denied",
    ErrorCode.NOT_FOUND: "Resource not found",
    ErrorCode.METHOD_NOT_ALLOWED: "Method not allowed",
    ErrorCode.CONFLICT: "Resource already exists",
    ErrorCode.HTTP_ERROR: "Request failed",
    ErrorCode.DATABASE_ERROR: "A database error occurred",
    ErrorCode.INTERNAL_ERROR: "An internal server error occurred",
}

_HTTP_STATUS_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.AUTHENTICATION_ERROR,
    403: ErrorCode.AUTHORIZATION_ERROR,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    409: ErrorCode.CONFLICT,
}


def _settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def _error(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: list[FieldError] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render the error envelope, masking the message in production."""
    if _settings(request).is_production:
        message = _PRODUCTION_MESSAGES.get(error, message)
    envelope = error_response(message, error, details)
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", by_alias=True),
        headers=headers,
    )


# ---------------------------------------------------------------------------
# Handler factories
# ---------------------------------------------------------------------------


def _make_handler(status_code: int, error: str):
    """Create an exception handler that returns the error envelope.

    Args:
        status_code: HTTP status code to return.
        error: Machine-readable error code.

    Returns:
        An async exception handler compatible with FastAPI.
    """

    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return _error(request, status_code, error, str(exc))

    return handler


async def _authentication_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    return _error(
        request,
        401,
        ErrorCode.AUTHENTICATION_ERROR,
        str(exc),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Turn FastAPI/pydantic validation failures into a 400 with field details."""
    details = [
        FieldError(
            field=".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]),
            message=err["msg"],
        )
        for err in exc.errors()
    ]
    return _error(
        request, 400, ErrorCode.VALIDATION_ERROR, "Validation failed", details
    )


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap framework HTTP errors (unknown route, bad method) in the envelope."""
    error = _HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.HTTP_ERROR)
    if exc.status_code >= 500:
        error = ErrorCode.INTERNAL_ERROR
    return _error(
        request,
        exc.status_code,
        error,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Handle persistent store failures.

    The underlying driver error was already logged by the repository.
    """
    logger.error(
        "Store failure on %s %s: %s", request.method, request.url.path, exc
    )
    return _error(request, 500, ErrorCode.DATABASE_ERROR, str(exc))


async def _unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Catch-all handler for unexpected exceptions.

    Logs the full traceback server-side; the client only ever sees the
    exception message, and not even that in production.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(request, 500, ErrorCode.INTERNAL_ERROR, str(exc) or type(exc).__name__)


# ---------------------------------------------------------------------------
# Public registration function
# ---------------------------------------------------------------------------


def register_exception_handlers(app: FastAPI) -> None:
    """Register all centralized exception handlers on the FastAPI app.

    Call this once during application startup (after creating the app
    instance, before including routers).

    Args:
        app: The FastAPI application instance.
    """
    # 404 Not Found
    not_found_handler = _make_handler(404, ErrorCode.NOT_FOUND)
    for exc_class in _NOT_FOUND_EXCEPTIONS:
        app.add_exception_handler(exc_class, not_found_handler)

    # 400 Bad Request
    bad_request_handler = _make_handler(400, ErrorCode.VALIDATION_ERROR)
    for exc_class in _BAD_REQUEST_EXCEPTIONS:
        app.add_exception_handler(exc_class, bad_request_handler)

    # 409 Conflict
    conflict_handler = _make_handler(409, ErrorCode.CONFLICT)
    for exc_class in _CONFLICT_EXCEPTIONS:
        app.add_exception_handler(exc_class, conflict_handler)

    # 401 / 403
    app.add_exception_handler(AuthenticationError, _authentication_handler)
    forbidden_handler = _make_handler(403, ErrorCode.AUTHORIZATION_ERROR)
    for exc_class in _FORBIDDEN_EXCEPTIONS:
        app.add_exception_handler(exc_class, forbidden_handler)

    # Framework-generated errors
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)

    # 500 store failures
    app.add_exception_handler(StoreError, _store_error_handler)

    # Catch-all for unhandled exceptions (must be registered last)
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    logger.info("Registered centralized exception handlers")
