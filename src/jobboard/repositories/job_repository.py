"""Repository for job posting storage and retrieval."""

from uuid import uuid4

from sqlalchemy import Row, delete, func, insert, select, update
from sqlalchemy.orm import joinedload, selectinload

from src.jobboard.domain.job import JobApplicationRef, JobDetail, JobSummary
from src.jobboard.domain.pagination import ListQuery, PaginatedResult
from src.jobboard.domain.user import UserRef
from src.jobboard.repositories.base import SqlRepository
from src.jobboard.repositories.errors import StoreWriteError
from src.jobboard.repositories.interfaces import JobRepositoryInterface
from src.jobboard.repositories.records import ApplicationRecord, JobRecord, UserRecord

_FILTER_COLUMNS = {
    "jobType": JobRecord.job_type,
    "experienceLevel": JobRecord.experience_level,
    "recruiterId": JobRecord.recruiter_id,
}

_application_count = (
    select(func.count(ApplicationRecord.id))
    .where(ApplicationRecord.job_id == JobRecord.id)
    .correlate(JobRecord)
    .scalar_subquery()
    .label("application_count")
)


def user_ref(user: UserRecord) -> UserRef:
    """Project a user row to the embedded id/name/email reference."""
    return UserRef(id=user.id, name=user.name, email=user.email)


def _job_fields(job: JobRecord) -> dict:
    return {
        "id": job.id,
        "title": job.title,
        "company": job.company,
        "location": job.location,
        "job_type": job.job_type,
        "experience_level": job.experience_level,
        "salary": job.salary,
        "description": job.description,
        "application_url": job.application_url,
        "posted_at": job.posted_at,
        "recruiter": user_ref(job.recruiter),
    }


def _to_summary(row: Row) -> JobSummary:
    return JobSummary(**_job_fields(row[0]), application_count=row.application_count)


def _to_detail(job: JobRecord) -> JobDetail:
    applications = [
        JobApplicationRef(
            id=application.id,
            status=application.status,
            applied_at=application.applied_at,
            candidate=user_ref(application.candidate),
        )
        for application in job.applications
    ]
    return JobDetail(
        **_job_fields(job),
        application_count=len(applications),
        applications=applications,
    )


class JobRepository(SqlRepository, JobRepositoryInterface):
    """SQLAlchemy repository for job postings.

    List rows embed the recruiter and an application count; the detail
    view loads every application with its candidate, newest first.
    """

    async def list_page(self, query: ListQuery) -> PaginatedResult[JobSummary]:
        statement = select(JobRecord, _application_count).options(
            joinedload(JobRecord.recruiter)
        )
        return await self._lists.fetch_page(
            statement=statement,
            query=query,
            filter_columns=_FILTER_COLUMNS,
            order_column=JobRecord.posted_at,
            id_column=JobRecord.id,
            to_item=_to_summary,
        )

    async def get_by_id(self, job_id: str) -> JobDetail | None:
        statement = (
            select(JobRecord)
            .options(
                joinedload(JobRecord.recruiter),
                selectinload(JobRecord.applications).joinedload(
                    ApplicationRecord.candidate
                ),
            )
            .where(JobRecord.id == job_id)
            .execution_options(populate_existing=True)
        )
        job = (await self._read(statement)).scalars().first()
        return _to_detail(job) if job is not None else None

    async def get_recruiter_id(self, job_id: str) -> str | None:
        result = await self._read(
            select(JobRecord.recruiter_id).where(JobRecord.id == job_id)
        )
        return result.scalar_one_or_none()

    async def create(self, values: dict) -> JobDetail:
        job_id = str(uuid4())
        await self._write(insert(JobRecord).values(id=job_id, **values))
        created = await self.get_by_id(job_id)
        if created is None:
            raise StoreWriteError("created job could not be read back")
        return created

    async def update(self, job_id: str, changes: dict) -> JobDetail | None:
        if changes:
            result = await self._write(
                update(JobRecord).where(JobRecord.id == job_id).values(**changes)
            )
            if result.rowcount == 0:
                return None
        return await self.get_by_id(job_id)

    async def delete(self, job_id: str) -> bool:
        result = await self._write(delete(JobRecord).where(JobRecord.id == job_id))
        return result.rowcount > 0

    async def exists(self, job_id: str) -> bool:
        result = await self._read(select(JobRecord.id).where(JobRecord.id == job_id))
        return result.first() is not None
