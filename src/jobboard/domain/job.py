"""Pydantic models for job postings."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import Field, HttpUrl, model_validator

from src.jobboard.domain.base import CamelModel
from src.jobboard.domain.user import UserRef

# Columns that may be cleared by sending an explicit null
_NULLABLE_FIELDS = frozenset({"salary", "application_url"})


class JobType(str, Enum):
    """Employment type of a posting."""

    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERNSHIP = "INTERNSHIP"


class ExperienceLevel(str, Enum):
    """Seniority a posting is aimed at."""

    ENTRY_LEVEL = "ENTRY_LEVEL"
    MID_LEVEL = "MID_LEVEL"
    SENIOR = "SENIOR"
    MANAGER = "MANAGER"


class JobSummary(CamelModel):
    """Job as returned by list endpoints.

    Carries the recruiter summary and the number of applications instead
    of the application rows themselves.
    """

    id: str
    title: str
    company: str
    location: str
    job_type: JobType
    experience_level: ExperienceLevel
    salary: str | None = None
    description: str
    application_url: str | None = None
    posted_at: datetime
    recruiter: UserRef
    application_count: int = Field(default=0, ge=0)


class JobApplicationRef(CamelModel):
    """Application row embedded in the job detail view."""

    id: str
    status: str
    applied_at: datetime
    candidate: UserRef


class JobDetail(JobSummary):
    """Job with its applications, newest first."""

    applications: list[JobApplicationRef] = Field(default_factory=list)


class JobCreate(CamelModel):
    """Request model for posting a job."""

    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: str = Field(min_length=1)
    job_type: JobType
    experience_level: ExperienceLevel
    salary: str | None = None
    description: str = Field(min_length=10)
    application_url: HttpUrl | None = None
    recruiter_id: UUID

    def to_record_values(self) -> dict:
        """Column values for inserting this job."""
        return self.model_dump(mode="json")


class JobUpdate(CamelModel):
    """Request model for editing a job. At least one field is required."""

    title: str | None = Field(default=None, min_length=1)
    company: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, min_length=1)
    job_type: JobType | None = None
    experience_level: ExperienceLevel | None = None
    salary: str | None = None
    description: str | None = Field(default=None, min_length=10)
    application_url: HttpUrl | None = None

    @model_validator(mode="after")
    def _require_one_field(self) -> "JobUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self

    def changes(self) -> dict:
        """Return only the fields the caller supplied, ready for storage."""
        values = self.model_dump(mode="json", exclude_unset=True)
        return {
            key: value
            for key, value in values.items()
            if value is not None or key in _NULLABLE_FIELDS
        }
