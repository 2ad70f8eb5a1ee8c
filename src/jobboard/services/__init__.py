# Services package (business logic layer)

from src.jobboard.services.application_service import (
    ApplicationExistsError,
    ApplicationNotFoundError,
    ApplicationService,
    ApplicationValidationError,
)
from src.jobboard.services.job_service import (
    JobNotFoundError,
    JobOwnershipError,
    JobService,
    JobValidationError,
)
from src.jobboard.services.list_cache import JOBS_CACHE, USERS_CACHE, ListCache
from src.jobboard.services.user_service import (
    UserExistsError,
    UserNotFoundError,
    UserService,
    UserValidationError,
)

__all__ = [
    "ApplicationExistsError",
    "ApplicationNotFoundError",
    "ApplicationService",
    "ApplicationValidationError",
    "JOBS_CACHE",
    "JobNotFoundError",
    "JobOwnershipError",
    "JobService",
    "JobValidationError",
    "ListCache",
    "USERS_CACHE",
    "UserExistsError",
    "UserNotFoundError",
    "UserService",
    "UserValidationError",
]
