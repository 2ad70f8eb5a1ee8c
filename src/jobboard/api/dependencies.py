"""Centralized FastAPI dependency providers.

All repository and service construction is defined here so that
routers never manually instantiate dependencies. The engine's session
factory and the Redis client live on ``app.state`` (created in the app
lifespan); tests replace any provider through ``app.dependency_overrides``.
"""

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.jobboard.config import Settings, get_settings
from src.jobboard.domain.filters import (
    APPLICATION_FILTER_FIELDS,
    JOB_FILTER_FIELDS,
    USER_FILTER_FIELDS,
    build_filters,
)
from src.jobboard.domain.pagination import ListQuery
from src.jobboard.repositories.application_repository import ApplicationRepository
from src.jobboard.repositories.job_repository import JobRepository
from src.jobboard.repositories.user_repository import UserRepository
from src.jobboard.services.application_service import ApplicationService
from src.jobboard.services.job_service import JobService
from src.jobboard.services.list_cache import ListCache
from src.jobboard.services.user_service import UserService

# ---------------------------------------------------------------------------
# Infrastructure providers (handles created in the app lifespan)
# ---------------------------------------------------------------------------


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Dependency provider for a request-scoped database session."""
    async with request.app.state.session_factory() as session:
        yield session


def get_list_cache(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ListCache:
    """Dependency provider for the list cache (always-miss without Redis)."""
    return ListCache(
        getattr(request.app.state, "redis", None),
        ttl_seconds=settings.cache_ttl_seconds,
        key_prefix=settings.cache_key_prefix,
    )


# ---------------------------------------------------------------------------
# List query providers (pagination + per-endpoint filters)
# ---------------------------------------------------------------------------


def get_list_query(
    settings: Annotated[Settings, Depends(get_settings)],
    page: Annotated[str | None, Query(description="1-indexed page number")] = None,
    limit: Annotated[str | None, Query(description="Items per page")] = None,
) -> ListQuery:
    """Resolve raw ``page``/``limit`` values; invalid input falls back to defaults."""
    return ListQuery.resolve(
        page,
        limit,
        default_page=settings.pagination_default_page,
        default_limit=settings.pagination_default_limit,
        max_limit=settings.pagination_max_limit,
    )


def get_user_list_query(
    query: Annotated[ListQuery, Depends(get_list_query)],
    role: Annotated[str | None, Query(description="CANDIDATE or RECRUITER")] = None,
) -> ListQuery:
    """List query for the users endpoints."""
    return query.with_filters(build_filters({"role": role}, USER_FILTER_FIELDS))


def get_job_list_query(
    query: Annotated[ListQuery, Depends(get_list_query)],
    job_type: Annotated[str | None, Query(alias="jobType")] = None,
    experience_level: Annotated[str | None, Query(alias="experienceLevel")] = None,
    recruiter_id: Annotated[str | None, Query(alias="recruiterId")] = None,
) -> ListQuery:
    """List query for the jobs endpoints."""
    raw = {
        "jobType": job_type,
        "experienceLevel": experience_level,
        "recruiterId": recruiter_id,
    }
    return query.with_filters(build_filters(raw, JOB_FILTER_FIELDS))


def get_application_list_query(
    query: Annotated[ListQuery, Depends(get_list_query)],
    status: Annotated[str | None, Query()] = None,
    job_id: Annotated[str | None, Query(alias="jobId")] = None,
    candidate_id: Annotated[str | None, Query(alias="candidateId")] = None,
) -> ListQuery:
    """List query for the applications endpoint."""
    raw = {"status": status, "jobId": job_id, "candidateId": candidate_id}
    return query.with_filters(build_filters(raw, APPLICATION_FILTER_FIELDS))


# ---------------------------------------------------------------------------
# Repository providers
# ---------------------------------------------------------------------------


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserRepository:
    """Dependency provider for UserRepository."""
    return UserRepository(session)


def get_job_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> JobRepository:
    """Dependency provider for JobRepository."""
    return JobRepository(session)


def get_application_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApplicationRepository:
    """Dependency provider for ApplicationRepository."""
    return ApplicationRepository(session)


# ---------------------------------------------------------------------------
# Service providers
# ---------------------------------------------------------------------------


def get_user_service(
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    cache: Annotated[ListCache, Depends(get_list_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserService:
    """Dependency provider for UserService."""
    return UserService(repository, cache, settings.cache_invalidate_on_write)


def get_job_service(
    repository: Annotated[JobRepository, Depends(get_job_repository)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    cache: Annotated[ListCache, Depends(get_list_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JobService:
    """Dependency provider for JobService."""
    return JobService(
        repository, user_repository, cache, settings.cache_invalidate_on_write
    )


def get_application_service(
    repository: Annotated[ApplicationRepository, Depends(get_application_repository)],
    job_repository: Annotated[JobRepository, Depends(get_job_repository)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    cache: Annotated[ListCache, Depends(get_list_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ApplicationService:
    """Dependency provider for ApplicationService."""
    return ApplicationService(
        repository,
        job_repository,
        user_repository,
        cache,
        settings.cache_invalidate_on_write,
    )
