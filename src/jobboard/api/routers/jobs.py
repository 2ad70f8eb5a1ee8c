"""API router for job postings.

``GET /jobs`` is the cached public feed. Editing or deleting a job
requires a bearer token belonging to the recruiter who posted it.
"""

import logging
import time
from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.jobboard.api.auth import CurrentUser
from src.jobboard.api.dependencies import get_job_list_query, get_job_service
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
from src.jobboard.domain.job import JobCreate, JobDetail, JobSummary, JobUpdate
from src.jobboard.domain.pagination import ListQuery
from src.jobboard.services.job_service import JobService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=SuccessEnvelope[ListPayload[JobSummary]])
async def list_jobs(
    service: Annotated[JobService, Depends(get_job_service)],
    query: Annotated[ListQuery, Depends(get_job_list_query)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SuccessEnvelope:
    """List jobs newest first, served through the Redis cache.

    Filters: ``jobType``, ``experienceLevel``, ``recruiterId``.
    """
    started = time.perf_counter()
    result, cached = await service.list_jobs(query)
    meta = ResponseMeta.since(started, cached, settings.cache_ttl_seconds)
    message = "Jobs fetched from cache" if cached else "Jobs fetched from database"
    return list_response(result, message=message, meta=meta)


@router.get("/mine", response_model=SuccessEnvelope[ListPayload[JobSummary]])
async def list_my_jobs(
    service: Annotated[JobService, Depends(get_job_service)],
    query: Annotated[ListQuery, Depends(get_job_list_query)],
    user: CurrentUser,
) -> SuccessEnvelope:
    """List the jobs posted by the authenticated recruiter (uncached)."""
    result = await service.list_for_recruiter(user.id, query)
    return list_response(result, message="Jobs fetched successfully")


@router.delete("/cached", response_model=SuccessEnvelope[CacheInvalidation])
async def invalidate_jobs_cache(
    service: Annotated[JobService, Depends(get_job_service)],
) -> SuccessEnvelope:
    """Drop every cached job list page."""
    deleted = await service.invalidate_list_cache()
    logger.info("Manual flush of cached job lists removed %d key(s)", deleted)
    return success_response(
        CacheInvalidation(deleted_keys=deleted),
        message="Cache invalidated successfully",
    )


@router.post(
    "",
    response_model=SuccessEnvelope[JobDetail],
    status_code=status.HTTP_201_CREATED,
)
async def create_job(
    service: Annotated[JobService, Depends(get_job_service)],
    data: JobCreate,
) -> SuccessEnvelope:
    """Post a job. Returns 400 if ``recruiterId`` does not exist."""
    job = await service.create(data)
    return success_response(job, message="Job created successfully")


@router.get("/{job_id}", response_model=SuccessEnvelope[JobDetail])
async def get_job(
    service: Annotated[JobService, Depends(get_job_service)],
    job_id: str,
) -> SuccessEnvelope:
    """Get a job with its recruiter and applications (newest first)."""
    job = await service.get(job_id)
    return success_response(job, message="Job fetched successfully")


@router.put("/{job_id}", response_model=SuccessEnvelope[JobDetail])
async def update_job(
    service: Annotated[JobService, Depends(get_job_service)],
    job_id: str,
    data: JobUpdate,
    user: CurrentUser,
) -> SuccessEnvelope:
    """Edit a job. Only the recruiter who posted it may do so."""
    job = await service.update(job_id, data, actor_id=user.id)
    return success_response(job, message="Job updated successfully")


@router.delete("/{job_id}", response_model=SuccessEnvelope[DeletedResource])
async def delete_job(
    service: Annotated[JobService, Depends(get_job_service)],
    job_id: str,
    user: CurrentUser,
) -> SuccessEnvelope:
    """Delete a job and its applications. Only the recruiter who posted it may do so."""
    await service.delete(job_id, actor_id=user.id)
    return success_response(DeletedResource(id=job_id), message="Job deleted successfully")
