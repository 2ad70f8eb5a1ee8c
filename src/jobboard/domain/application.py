"""Pydantic models for job applications."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import Field

from src.jobboard.domain.base import CamelModel
from src.jobboard.domain.job import ExperienceLevel, JobType
from src.jobboard.domain.user import Role, UserRef


class ApplicationStatus(str, Enum):
    """Where an application is in the hiring pipeline."""

    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    INTERVIEWING = "INTERVIEWING"
    REJECTED = "REJECTED"
    OFFERED = "OFFERED"


class ApplicationJobRef(CamelModel):
    """Job projection embedded in application listings."""

    id: str
    title: str
    company: str
    location: str
    job_type: JobType
    experience_level: ExperienceLevel


class ApplicationJobDetail(ApplicationJobRef):
    """Job projection embedded in the application detail view."""

    salary: str | None = None
    description: str
    application_url: str | None = None
    recruiter: UserRef


class CandidateRef(UserRef):
    """Candidate projection embedded in the application detail view."""

    role: Role


class ApplicationSummary(CamelModel):
    """Application as returned by list endpoints."""

    id: str
    status: ApplicationStatus
    applied_at: datetime
    job: ApplicationJobRef
    candidate: UserRef


class ApplicationDetail(CamelModel):
    """Application with the full job and candidate details."""

    id: str
    status: ApplicationStatus
    applied_at: datetime
    job: ApplicationJobDetail
    candidate: CandidateRef


class ApplicationCreate(CamelModel):
    """Request model for applying to a job."""

    job_id: UUID = Field(description="Job being applied to")
    candidate_id: UUID = Field(description="Applying candidate")

    def to_record_values(self) -> dict:
        """Column values for inserting this application."""
        return self.model_dump(mode="json")


class ApplicationUpdate(CamelModel):
    """Request model for moving an application to a new status."""

    status: ApplicationStatus
