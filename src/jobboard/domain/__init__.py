# Domain models package (Pydantic models)

from src.jobboard.domain.application import (
    ApplicationCreate,
    ApplicationDetail,
    ApplicationJobDetail,
    ApplicationJobRef,
    ApplicationStatus,
    ApplicationSummary,
    ApplicationUpdate,
    CandidateRef,
)
from src.jobboard.domain.envelope import (
    CacheInvalidation,
    DeletedResource,
    ErrorCode,
    ErrorEnvelope,
    FieldError,
    ListPayload,
    PaginationMeta,
    ResponseMeta,
    SuccessEnvelope,
)
from src.jobboard.domain.filters import (
    APPLICATION_FILTER_FIELDS,
    JOB_FILTER_FIELDS,
    USER_FILTER_FIELDS,
    build_filters,
)
from src.jobboard.domain.job import (
    ExperienceLevel,
    JobApplicationRef,
    JobCreate,
    JobDetail,
    JobSummary,
    JobType,
    JobUpdate,
)
from src.jobboard.domain.pagination import ListQuery, PaginatedResult, resolve_pagination
from src.jobboard.domain.user import (
    Role,
    UserCounts,
    UserCreate,
    UserRef,
    UserSummary,
    UserUpdate,
)

__all__ = [
    "APPLICATION_FILTER_FIELDS",
    "ApplicationCreate",
    "ApplicationDetail",
    "ApplicationJobDetail",
    "ApplicationJobRef",
    "ApplicationStatus",
    "ApplicationSummary",
    "ApplicationUpdate",
    "CacheInvalidation",
    "CandidateRef",
    "DeletedResource",
    "ErrorCode",
    "ErrorEnvelope",
    "ExperienceLevel",
    "FieldError",
    "JOB_FILTER_FIELDS",
    "JobApplicationRef",
    "JobCreate",
    "JobDetail",
    "JobSummary",
    "JobType",
    "JobUpdate",
    "ListPayload",
    "ListQuery",
    "PaginatedResult",
    "PaginationMeta",
    "ResponseMeta",
    "Role",
    "SuccessEnvelope",
    "USER_FILTER_FIELDS",
    "UserCounts",
    "UserCreate",
    "UserRef",
    "UserSummary",
    "UserUpdate",
    "build_filters",
    "resolve_pagination",
]
