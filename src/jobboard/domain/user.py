"""Pydantic models for users (candidates and recruiters)."""

from datetime import datetime
from enum import Enum

from pydantic import EmailStr, Field, model_validator

from src.jobboard.domain.base import CamelModel


class Role(str, Enum):
    """What a user does on the board."""

    CANDIDATE = "CANDIDATE"
    RECRUITER = "RECRUITER"


class UserRef(CamelModel):
    """Minimal user projection embedded in jobs and applications."""

    id: str
    name: str | None = None
    email: str


class UserCounts(CamelModel):
    """Related-row counts included in user listings."""

    posted_jobs: int = Field(default=0, ge=0)
    applications: int = Field(default=0, ge=0)


class UserSummary(CamelModel):
    """User as returned by list and detail endpoints."""

    id: str = Field(description="UUID of the user")
    email: str = Field(description="Unique e-mail address")
    name: str | None = Field(default=None, description="Display name")
    role: Role = Field(description="CANDIDATE or RECRUITER")
    created_at: datetime = Field(description="When the user registered")
    counts: UserCounts = Field(default_factory=UserCounts)


class UserCreate(CamelModel):
    """Request model for creating a user."""

    email: EmailStr = Field(description="Unique e-mail address")
    name: str | None = Field(default=None, min_length=1, description="Display name")
    role: Role = Field(default=Role.CANDIDATE)

    def to_record_values(self) -> dict:
        """Column values for inserting this user."""
        return self.model_dump(mode="json")


class UserUpdate(CamelModel):
    """Request model for updating a user. At least one field is required."""

    email: EmailStr | None = None
    name: str | None = Field(default=None, min_length=1)
    role: Role | None = None

    @model_validator(mode="after")
    def _require_one_field(self) -> "UserUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self

    def changes(self) -> dict:
        """Return only the fields the caller supplied, ready for storage."""
        values = self.model_dump(mode="json", exclude_unset=True)
        # email and role are NOT NULL; name may be cleared
        return {
            key: value
            for key, value in values.items()
            if value is not None or key == "name"
        }
