"""Service layer for user business logic."""

import logging

from src.jobboard.domain.pagination import ListQuery, PaginatedResult
from src.jobboard.domain.user import UserCreate, UserSummary, UserUpdate
from src.jobboard.repositories.errors import UniqueViolationError
from src.jobboard.repositories.interfaces import UserRepositoryInterface
from src.jobboard.services.list_cache import JOBS_CACHE, USERS_CACHE, ListCache

logger = logging.getLogger(__name__)

# User rows feed the user list and the recruiter summaries in job lists
_AFFECTED_CACHES = (USERS_CACHE, JOBS_CACHE)


class UserNotFoundError(Exception):
    """Raised when a user is not found."""


class UserExistsError(Exception):
    """Raised when an e-mail address is already registered."""


class UserValidationError(Exception):
    """Raised when a user request is valid JSON but cannot be applied."""


class UserService:
    """Business logic for managing users.

    Writes invalidate the list caches they affect when
    ``invalidate_on_write`` is set; otherwise cached pages stay stale
    until their TTL runs out or they are invalidated explicitly.
    """

    def __init__(
        self,
        repository: UserRepositoryInterface,
        cache: ListCache,
        invalidate_on_write: bool = True,
    ) -> None:
        """Initialize service with repository and list cache.

        Args:
            repository: User repository for data access
            cache: Cache-aside wrapper for list reads
            invalidate_on_write: Drop affected list caches after each write
        """
        self._repository = repository
        self._cache = cache
        self._invalidate_on_write = invalidate_on_write

    async def list_users(self, query: ListQuery) -> PaginatedResult[UserSummary]:
        """List users straight from the store."""
        return await self._repository.list_page(query)

    async def list_users_cached(
        self, query: ListQuery
    ) -> tuple[PaginatedResult[UserSummary], bool]:
        """List users through the cache.

        Returns:
            Tuple of (page of users, served_from_cache)
        """
        return await self._cache.get_or_load(
            USERS_CACHE,
            query,
            lambda: self._repository.list_page(query),
            PaginatedResult[UserSummary],
        )

    async def invalidate_list_cache(self) -> int:
        """Drop every cached user list page, returning the number of keys deleted."""
        return await self._cache.invalidate(USERS_CACHE)

    async def get(self, user_id: str) -> UserSummary:
        """Get a user by ID.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = await self._repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User '{user_id}' not found")
        return user

    async def create(self, data: UserCreate) -> UserSummary:
        """Register a new user.

        Args:
            data: Validated create request

        Returns:
            The created user

        Raises:
            UserExistsError: If the e-mail address is taken
        """
        values = data.to_record_values()
        if await self._repository.get_by_email(values["email"]) is not None:
            raise UserExistsError(f"User with email '{values['email']}' already exists")

        try:
            user = await self._repository.create(values)
        except UniqueViolationError as e:
            raise UserExistsError(
                f"User with email '{values['email']}' already exists"
            ) from e

        logger.info("Created user %s role=%s", user.id, user.role.value)
        await self._after_write()
        return user

    async def update(self, user_id: str, data: UserUpdate) -> UserSummary:
        """Update a user's e-mail, name or role.

        Args:
            user_id: User to update
            data: Fields to change; at least one must be set

        Returns:
            The updated user

        Raises:
            UserValidationError: If no applicable field was supplied
            UserNotFoundError: If the user does not exist
            UserExistsError: If the new e-mail belongs to another user
        """
        changes = data.changes()
        if not changes:
            raise UserValidationError("At least one field must be provided for update")

        email = changes.get("email")
        if email is not None:
            owner = await self._repository.get_by_email(email)
            if owner is not None and owner.id != user_id:
                raise UserExistsError(f"User with email '{email}' already exists")

        try:
            user = await self._repository.update(user_id, changes)
        except UniqueViolationError as e:
            raise UserExistsError(f"User with email '{email}' already exists") from e
        if user is None:
            raise UserNotFoundError(f"User '{user_id}' not found")

        logger.info("Updated user %s fields=%s", user_id, sorted(changes))
        await self._after_write()
        return user

    async def delete(self, user_id: str) -> None:
        """Delete a user together with their jobs and applications.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        if not await self._repository.delete(user_id):
            raise UserNotFoundError(f"User '{user_id}' not found")
        logger.info("Deleted user %s", user_id)
        await self._after_write()

    async def _after_write(self) -> None:
        if not self._invalidate_on_write:
            return
        for endpoint in _AFFECTED_CACHES:
            await self._cache.invalidate(endpoint)
