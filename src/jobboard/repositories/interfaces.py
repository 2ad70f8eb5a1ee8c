"""Abstract base classes for repository interfaces.

Services depend on these contracts rather than on the SQLAlchemy
implementations, so tests can substitute mocks.
"""

from abc import ABC, abstractmethod

from src.jobboard.domain.application import ApplicationDetail, ApplicationSummary
from src.jobboard.domain.job import JobDetail, JobSummary
from src.jobboard.domain.pagination import ListQuery, PaginatedResult
from src.jobboard.domain.user import UserSummary


class UserRepositoryInterface(ABC):
    """Abstract interface for user storage and retrieval."""

    @abstractmethod
    async def list_page(self, query: ListQuery) -> PaginatedResult[UserSummary]:
        """List users newest first, with posted-job and application counts.

        Args:
            query: Page, limit and filters (``role``)

        Returns:
            One page of user summaries

        Raises:
            StoreReadError: If the store cannot be read
        """
        ...

    @abstractmethod
    async def get_by_id(self, user_id: str) -> UserSummary | None:
        """Get a user by ID, or None if it does not exist."""
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> UserSummary | None:
        """Get a user by e-mail address, or None if it does not exist."""
        ...

    @abstractmethod
    async def create(self, values: dict) -> UserSummary:
        """Insert a user.

        Args:
            values: Column values (email, name, role)

        Returns:
            Created user

        Raises:
            UniqueViolationError: If the e-mail is already registered
            StoreWriteError: If the insert fails for another reason
        """
        ...

    @abstractmethod
    async def update(self, user_id: str, changes: dict) -> UserSummary | None:
        """Apply ``changes`` to a user.

        Returns:
            Updated user, or None if it does not exist

        Raises:
            UniqueViolationError: If the new e-mail is already registered
        """
        ...

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """Delete a user along with their jobs and applications.

        Returns:
            True if deleted, False if not found
        """
        ...

    @abstractmethod
    async def exists(self, user_id: str) -> bool:
        """Check whether a user exists."""
        ...


class JobRepositoryInterface(ABC):
    """Abstract interface for job posting storage and retrieval."""

    @abstractmethod
    async def list_page(self, query: ListQuery) -> PaginatedResult[JobSummary]:
        """List jobs newest first with recruiter summary and application count.

        Args:
            query: Page, limit and filters (``jobType``, ``experienceLevel``,
                ``recruiterId``)

        Returns:
            One page of job summaries

        Raises:
            StoreReadError: If the store cannot be read
        """
        ...

    @abstractmethod
    async def get_by_id(self, job_id: str) -> JobDetail | None:
        """Get a job with its applications (newest first), or None."""
        ...

    @abstractmethod
    async def get_recruiter_id(self, job_id: str) -> str | None:
        """Get the ID of the recruiter owning a job, or None if it does not exist."""
        ...

    @abstractmethod
    async def create(self, values: dict) -> JobDetail:
        """Insert a job.

        Raises:
            StoreWriteError: If the insert fails
        """
        ...

    @abstractmethod
    async def update(self, job_id: str, changes: dict) -> JobDetail | None:
        """Apply ``changes`` to a job, returning None if it does not exist."""
        ...

    @abstractmethod
    async def delete(self, job_id: str) -> bool:
        """Delete a job and its applications.

        Returns:
            True if deleted, False if not found
        """
        ...

    @abstractmethod
    async def exists(self, job_id: str) -> bool:
        """Check whether a job exists."""
        ...


class ApplicationRepositoryInterface(ABC):
    """Abstract interface for application storage and retrieval."""

    @abstractmethod
    async def list_page(self, query: ListQuery) -> PaginatedResult[ApplicationSummary]:
        """List applications newest first with job and candidate summaries.

        Args:
            query: Page, limit and filters (``status``, ``jobId``, ``candidateId``)

        Returns:
            One page of application summaries

        Raises:
            StoreReadError: If the store cannot be read
        """
        ...

    @abstractmethod
    async def get_by_id(self, application_id: str) -> ApplicationDetail | None:
        """Get an application with full job and candidate details, or None."""
        ...

    @abstractmethod
    async def find_id(self, job_id: str, candidate_id: str) -> str | None:
        """Get the ID of a candidate's application to a job, or None."""
        ...

    @abstractmethod
    async def create(self, values: dict) -> ApplicationDetail:
        """Insert an application.

        Raises:
            UniqueViolationError: If the candidate already applied to the job
            StoreWriteError: If the insert fails for another reason
        """
        ...

    @abstractmethod
    async def update_status(
        self, application_id: str, status: str
    ) -> ApplicationDetail | None:
        """Set an application's status, returning None if it does not exist."""
        ...

    @abstractmethod
    async def delete(self, application_id: str) -> bool:
        """Delete an application.

        Returns:
            True if deleted, False if not found
        """
        ...
