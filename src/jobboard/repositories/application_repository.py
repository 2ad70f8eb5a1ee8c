"""Repository for job application storage and retrieval."""

from uuid import uuid4

from sqlalchemy import Row, delete, insert, select, update
from sqlalchemy.orm import joinedload

from src.jobboard.domain.application import (
    ApplicationDetail,
    ApplicationJobDetail,
    ApplicationJobRef,
    ApplicationSummary,
    CandidateRef,
)
from src.jobboard.domain.pagination import ListQuery, PaginatedResult
from src.jobboard.repositories.base import SqlRepository
from src.jobboard.repositories.errors import StoreWriteError
from src.jobboard.repositories.interfaces import ApplicationRepositoryInterface
from src.jobboard.repositories.job_repository import user_ref
from src.jobboard.repositories.records import ApplicationRecord, JobRecord

_FILTER_COLUMNS = {
    "status": ApplicationRecord.status,
    "jobId": ApplicationRecord.job_id,
    "candidateId": ApplicationRecord.candidate_id,
}


def _to_summary(row: Row) -> ApplicationSummary:
    application = row[0]
    job = application.job
    return ApplicationSummary(
        id=application.id,
        status=application.status,
        applied_at=application.applied_at,
        job=ApplicationJobRef(
            id=job.id,
            title=job.title,
            company=job.company,
            location=job.location,
            job_type=job.job_type,
            experience_level=job.experience_level,
        ),
        candidate=user_ref(application.candidate),
    )


def _to_detail(application: ApplicationRecord) -> ApplicationDetail:
    job = application.job
    candidate = application.candidate
    return ApplicationDetail(
        id=application.id,
        status=application.status,
        applied_at=application.applied_at,
        job=ApplicationJobDetail(
            id=job.id,
            title=job.title,
            company=job.company,
            location=job.location,
            job_type=job.job_type,
            experience_level=job.experience_level,
            salary=job.salary,
            description=job.description,
            application_url=job.application_url,
            recruiter=user_ref(job.recruiter),
        ),
        candidate=CandidateRef(
            id=candidate.id,
            name=candidate.name,
            email=candidate.email,
            role=candidate.role,
        ),
    )


class ApplicationRepository(SqlRepository, ApplicationRepositoryInterface):
    """SQLAlchemy repository for job applications."""

    async def list_page(self, query: ListQuery) -> PaginatedResult[ApplicationSummary]:
        statement = select(ApplicationRecord).options(
            joinedload(ApplicationRecord.job),
            joinedload(ApplicationRecord.candidate),
        )
        return await self._lists.fetch_page(
            statement=statement,
            query=query,
            filter_columns=_FILTER_COLUMNS,
            order_column=ApplicationRecord.applied_at,
            id_column=ApplicationRecord.id,
            to_item=_to_summary,
        )

    async def get_by_id(self, application_id: str) -> ApplicationDetail | None:
        statement = (
            select(ApplicationRecord)
            .options(
                joinedload(ApplicationRecord.job).joinedload(JobRecord.recruiter),
                joinedload(ApplicationRecord.candidate),
            )
            .where(ApplicationRecord.id == application_id)
            .execution_options(populate_existing=True)
        )
        application = (await self._read(statement)).scalars().first()
        return _to_detail(application) if application is not None else None

    async def find_id(self, job_id: str, candidate_id: str) -> str | None:
        result = await self._read(
            select(ApplicationRecord.id).where(
                ApplicationRecord.job_id == job_id,
                ApplicationRecord.candidate_id == candidate_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, values: dict) -> ApplicationDetail:
        application_id = str(uuid4())
        await self._write(
            insert(ApplicationRecord).values(id=application_id, **values)
        )
        created = await self.get_by_id(application_id)
        if created is None:
            raise StoreWriteError("created application could not be read back")
        return created

    async def update_status(
        self, application_id: str, status: str
    ) -> ApplicationDetail | None:
        result = await self._write(
            update(ApplicationRecord)
            .where(ApplicationRecord.id == application_id)
            .values(status=status)
        )
        if result.rowcount == 0:
            return None
        return await self.get_by_id(application_id)

    async def delete(self, application_id: str) -> bool:
        result = await self._write(
            delete(ApplicationRecord).where(ApplicationRecord.id == application_id)
        )
        return result.rowcount > 0
