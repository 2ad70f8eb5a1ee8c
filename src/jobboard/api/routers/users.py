"""API router for user management."""

import logging
import time
from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.jobboard.api.dependencies import get_user_list_query, get_user_service
from src.jobboard.config import Settings, get_settings
from src.jobboard.domain.envelope import (
    CacheInvalidation,
    DeletedResource,
    ListPayload,
    ResponseMeta,
    SuccessEnvelope,
    list_response,
    success_response,
)
from src.jobboard.domain.pagination import ListQuery
from src.jobboard.domain.user import UserCreate, UserSummary, UserUpdate
from src.jobboard.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=SuccessEnvelope[ListPayload[UserSummary]])
async def list_users(
    service: Annotated[UserService, Depends(get_user_service)],
    query: Annotated[ListQuery, Depends(get_user_list_query)],
) -> SuccessEnvelope:
    """List users, newest first, straight from the database.

    Query parameters ``page`` and ``limit`` never fail validation: bad
    values fall back to the defaults. ``role`` filters by exact match.
    """
    result = await service.list_users(query)
    return list_response(result, message="Users fetched successfully")


@router.get("/cached", response_model=SuccessEnvelope[ListPayload[UserSummary]])
async def list_users_cached(
    service: Annotated[UserService, Depends(get_user_service)],
    query: Annotated[ListQuery, Depends(get_user_list_query)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SuccessEnvelope:
    """List users through the Redis cache.

    Same payload as ``GET /users``. ``meta.cached`` tells whether the page
    came from the cache, ``meta.responseTimeMs`` how long the request took.
    """
    started = time.perf_counter()
    result, cached = await service.list_users_cached(query)
    meta = ResponseMeta.since(started, cached, settings.cache_ttl_seconds)
    message = "Users fetched from cache" if cached else "Users fetched from database"
    return list_response(result, message=message, meta=meta)


@router.delete("/cached", response_model=SuccessEnvelope[CacheInvalidation])
async def invalidate_users_cache(
    service: Annotated[UserService, Depends(get_user_service)],
) -> SuccessEnvelope:
    """Drop every cached user list page."""
    deleted = await service.invalidate_list_cache()
    logger.info("Manual flush of cached user lists removed %d key(s)", deleted)
    return success_response(
        CacheInvalidation(deleted_keys=deleted),
        message="Cache invalidated successfully",
    )


@router.post(
    "",
    response_model=SuccessEnvelope[UserSummary],
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    service: Annotated[UserService, Depends(get_user_service)],
    data: UserCreate,
) -> SuccessEnvelope:
    """Register a user. Returns 409 if the e-mail address is taken."""
    user = await service.create(data)
    return success_response(user, message="User created successfully")


@router.get("/{user_id}", response_model=SuccessEnvelope[UserSummary])
async def get_user(
    service: Annotated[UserService, Depends(get_user_service)],
    user_id: str,
) -> SuccessEnvelope:
    """Get a user by ID."""
    user = await service.get(user_id)
    return success_response(user, message="User fetched successfully")


@router.put("/{user_id}", response_model=SuccessEnvelope[UserSummary])
async def update_user(
    service: Annotated[UserService, Depends(get_user_service)],
    user_id: str,
    data: UserUpdate,
) -> SuccessEnvelope:
    """Update a user's e-mail, name or role."""
    user = await service.update(user_id, data)
    return success_response(user, message="User updated successfully")


@router.delete("/{user_id}", response_model=SuccessEnvelope[DeletedResource])
async def delete_user(
    service: Annotated[UserService, Depends(get_user_service)],
    user_id: str,
) -> SuccessEnvelope:
    """Delete a user along with every job and application they own."""
    await service.delete(user_id)
    return success_response(
        DeletedResource(id=user_id), message="User deleted successfully"
    )
