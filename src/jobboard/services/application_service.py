"""Service layer for job application business logic."""

import logging

from src.jobboard.domain.application import (
    ApplicationCreate,
    ApplicationDetail,
    ApplicationSummary,
    ApplicationUpdate,
)
from src.jobboard.domain.pagination import ListQuery, PaginatedResult
from src.jobboard.repositories.errors import UniqueViolationError
from src.jobboard.repositories.interfaces import (
    ApplicationRepositoryInterface,
    JobRepositoryInterface,
    UserRepositoryInterface,
)
from src.jobboard.services.list_cache import JOBS_CACHE, USERS_CACHE, ListCache

logger = logging.getLogger(__name__)

# Applications feed the job application counts and the user application counts
_AFFECTED_CACHES = (JOBS_CACHE, USERS_CACHE)


class ApplicationNotFoundError(Exception):
    """Raised when an application is not found."""


class ApplicationExistsError(Exception):
    """Raised when a candidate applies to the same job twice."""


class ApplicationValidationError(Exception):
    """Raised when an application references a missing job or candidate."""


class ApplicationService:
    """Business logic for job applications. Application lists are never cached."""

    def __init__(
        self,
        repository: ApplicationRepositoryInterface,
        job_repository: JobRepositoryInterface,
        user_repository: UserRepositoryInterface,
        cache: ListCache,
        invalidate_on_write: bool = True,
    ) -> None:
        self._repository = repository
        self._job_repository = job_repository
        self._user_repository = user_repository
        self._cache = cache
        self._invalidate_on_write = invalidate_on_write

    async def list_applications(
        self, query: ListQuery
    ) -> PaginatedResult[ApplicationSummary]:
        """List applications straight from the store."""
        return await self._repository.list_page(query)

    async def get(self, application_id: str) -> ApplicationDetail:
        """Get an application with its job and candidate.

        Raises:
            ApplicationNotFoundError: If the application does not exist
        """
        application = await self._repository.get_by_id(application_id)
        if application is None:
            raise ApplicationNotFoundError(f"Application '{application_id}' not found")
        return application

    async def apply(self, data: ApplicationCreate) -> ApplicationDetail:
        """Submit a candidate's application to a job.

        Args:
            data: Job and candidate IDs

        Returns:
            The created application, status PENDING

        Raises:
            ApplicationValidationError: If the job or candidate does not exist
            ApplicationExistsError: If the candidate already applied
        """
        values = data.to_record_values()
        job_id, candidate_id = values["job_id"], values["candidate_id"]

        if not await self._job_repository.exists(job_id):
            raise ApplicationValidationError(f"Job '{job_id}' not found")
        if not await self._user_repository.exists(candidate_id):
            raise ApplicationValidationError(f"Candidate '{candidate_id}' not found")
        if await self._repository.find_id(job_id, candidate_id) is not None:
            raise ApplicationExistsError("Candidate has already applied to this job")

        try:
            application = await self._repository.create(values)
        except UniqueViolationError as e:
            raise ApplicationExistsError(
                "Candidate has already applied to this job"
            ) from e

        logger.info(
            "Candidate %s applied to job %s (application %s)",
            candidate_id,
            job_id,
            application.id,
        )
        await self._after_write()
        return application

    async def update_status(
        self, application_id: str, data: ApplicationUpdate
    ) -> ApplicationDetail:
        """Move an application to a new status.

        Raises:
            ApplicationNotFoundError: If the application does not exist
        """
        application = await self._repository.update_status(
            application_id, data.status.value
        )
        if application is None:
            raise ApplicationNotFoundError(f"Application '{application_id}' not found")

        logger.info("Application %s status -> %s", application_id, data.status.value)
        await self._after_write()
        return application

    async def withdraw(self, application_id: str) -> None:
        """Delete an application.

        Raises:
            ApplicationNotFoundError: If the application does not exist
        """
        if not await self._repository.delete(application_id):
            raise ApplicationNotFoundError(f"Application '{application_id}' not found")
        logger.info("Deleted application %s", application_id)
        await self._after_write()

    async def _after_write(self) -> None:
        if not self._invalidate_on_write:
            return
        for endpoint in _AFFECTED_CACHES:
            await self._cache.invalidate(endpoint)
