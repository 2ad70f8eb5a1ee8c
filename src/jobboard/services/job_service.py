"""Service layer for job posting business logic."""

import logging

from src.jobboard.domain.job import JobCreate, JobDetail, JobSummary, JobUpdate
from src.jobboard.domain.pagination import ListQuery, PaginatedResult
from src.jobboard.repositories.interfaces import (
    JobRepositoryInterface,
    UserRepositoryInterface,
)
from src.jobboard.services.list_cache import JOBS_CACHE, USERS_CACHE, ListCache

logger = logging.getLogger(__name__)

# Job rows feed the job list and the posted-job counts in user lists
_AFFECTED_CACHES = (JOBS_CACHE, USERS_CACHE)


class JobNotFoundError(Exception):
    """Raised when a job posting is not found."""


class JobValidationError(Exception):
    """Raised when a job request references missing records or changes nothing."""


class JobOwnershipError(Exception):
    """Raised when a user modifies a job posted by another recruiter."""


class JobService:
    """Business logic for job postings.

    The public job list is served through the cache; the per-recruiter
    list and the detail view always read the store.
    """

    def __init__(
        self,
        repository: JobRepositoryInterface,
        user_repository: UserRepositoryInterface,
        cache: ListCache,
        invalidate_on_write: bool = True,
    ) -> None:
        """Initialize service with repositories and list cache.

        Args:
            repository: Job repository for data access
            user_repository: User repository, used to check recruiters exist
            cache: Cache-aside wrapper for list reads
            invalidate_on_write: Drop affected list caches after each write
        """
        self._repository = repository
        self._user_repository = user_repository
        self._cache = cache
        self._invalidate_on_write = invalidate_on_write

    async def list_jobs(
        self, query: ListQuery
    ) -> tuple[PaginatedResult[JobSummary], bool]:
        """List jobs through the cache.

        Returns:
            Tuple of (page of jobs, served_from_cache)
        """
        return await self._cache.get_or_load(
            JOBS_CACHE,
            query,
            lambda: self._repository.list_page(query),
            PaginatedResult[JobSummary],
        )

    async def list_for_recruiter(
        self, recruiter_id: str, query: ListQuery
    ) -> PaginatedResult[JobSummary]:
        """List the jobs posted by one recruiter, bypassing the cache."""
        scoped = query.with_filters({**query.filters, "recruiterId": recruiter_id})
        return await self._repository.list_page(scoped)

    async def invalidate_list_cache(self) -> int:
        """Drop every cached job list page, returning the number of keys deleted."""
        return await self._cache.invalidate(JOBS_CACHE)

    async def get(self, job_id: str) -> JobDetail:
        """Get a job with its applications.

        Raises:
            JobNotFoundError: If the job does not exist
        """
        job = await self._repository.get_by_id(job_id)
        if job is None:
            raise JobNotFoundError(f"Job '{job_id}' not found")
        return job

    async def create(self, data: JobCreate) -> JobDetail:
        """Post a new job.

        Raises:
            JobValidationError: If the recruiter does not exist
        """
        values = data.to_record_values()
        if not await self._user_repository.exists(values["recruiter_id"]):
            raise JobValidationError(f"Recruiter '{values['recruiter_id']}' not found")

        job = await self._repository.create(values)
        logger.info("Created job %s for recruiter %s", job.id, job.recruiter.id)
        await self._after_write()
        return job

    async def update(self, job_id: str, data: JobUpdate, actor_id: str) -> JobDetail:
        """Edit a job on behalf of its recruiter.

        Args:
            job_id: Job to edit
            data: Fields to change; at least one must be set
            actor_id: ID of the authenticated user

        Returns:
            The updated job

        Raises:
            JobNotFoundError: If the job does not exist
            JobOwnershipError: If ``actor_id`` did not post the job
            JobValidationError: If no applicable field was supplied
        """
        await self._check_owner(job_id, actor_id)

        changes = data.changes()
        if not changes:
            raise JobValidationError("At least one field must be provided for update")

        job = await self._repository.update(job_id, changes)
        if job is None:
            raise JobNotFoundError(f"Job '{job_id}' not found")

        logger.info("Updated job %s fields=%s", job_id, sorted(changes))
        await self._after_write()
        return job

    async def delete(self, job_id: str, actor_id: str) -> None:
        """Delete a job and its applications on behalf of its recruiter.

        Raises:
            JobNotFoundError: If the job does not exist
            JobOwnershipError: If ``actor_id`` did not post the job
        """
        await self._check_owner(job_id, actor_id)
        if not await self._repository.delete(job_id):
            raise JobNotFoundError(f"Job '{job_id}' not found")
        logger.info("Deleted job %s", job_id)
        await self._after_write()

    async def _check_owner(self, job_id: str, actor_id: str) -> None:
        recruiter_id = await self._repository.get_recruiter_id(job_id)
        if recruiter_id is None:
            raise JobNotFoundError(f"Job '{job_id}' not found")
        if recruiter_id != actor_id:
            logger.warning("User %s denied access to job %s", actor_id, job_id)
            raise JobOwnershipError("You can only modify jobs you posted")

    async def _after_write(self) -> None:
        if not self._invalidate_on_write:
            return
        for endpoint in _AFFECTED_CACHES:
            await self._cache.invalidate(endpoint)
