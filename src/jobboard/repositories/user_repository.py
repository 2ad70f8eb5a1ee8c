"""Repository for user storage and retrieval."""

from uuid import uuid4

from sqlalchemy import Row, delete, func, insert, select, update

from src.jobboard.domain.pagination import ListQuery, PaginatedResult
from src.jobboard.domain.user import UserCounts, UserSummary
from src.jobboard.repositories.base import SqlRepository
from src.jobboard.repositories.errors import StoreWriteError
from src.jobboard.repositories.interfaces import UserRepositoryInterface
from src.jobboard.repositories.records import ApplicationRecord, JobRecord, UserRecord

_FILTER_COLUMNS = {"role": UserRecord.role}

_posted_jobs = (
    select(func.count(JobRecord.id))
    .where(JobRecord.recruiter_id == UserRecord.id)
    .correlate(UserRecord)
    .scalar_subquery()
    .label("posted_jobs")
)
_applications = (
    select(func.count(ApplicationRecord.id))
    .where(ApplicationRecord.candidate_id == UserRecord.id)
    .correlate(UserRecord)
    .scalar_subquery()
    .label("applications")
)


def _to_summary(row: Row) -> UserSummary:
    user = row[0]
    return UserSummary(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        created_at=user.created_at,
        counts=UserCounts(posted_jobs=row.posted_jobs, applications=row.applications),
    )


class UserRepository(SqlRepository, UserRepositoryInterface):
    """SQLAlchemy repository for users.

    Summaries carry the number of jobs a user posted and the number of
    applications they submitted, computed with correlated subqueries.
    """

    def _summary_statement(self):
        return select(UserRecord, _posted_jobs, _applications).execution_options(
            populate_existing=True
        )

    async def list_page(self, query: ListQuery) -> PaginatedResult[UserSummary]:
        return await self._lists.fetch_page(
            statement=self._summary_statement(),
            query=query,
            filter_columns=_FILTER_COLUMNS,
            order_column=UserRecord.created_at,
            id_column=UserRecord.id,
            to_item=_to_summary,
        )

    async def get_by_id(self, user_id: str) -> UserSummary | None:
        result = await self._read(
            self._summary_statement().where(UserRecord.id == user_id)
        )
        row = result.first()
        return _to_summary(row) if row is not None else None

    async def get_by_email(self, email: str) -> UserSummary | None:
        result = await self._read(
            self._summary_statement().where(UserRecord.email == email)
        )
        row = result.first()
        return _to_summary(row) if row is not None else None

    async def create(self, values: dict) -> UserSummary:
        user_id = str(uuid4())
        await self._write(insert(UserRecord).values(id=user_id, **values))
        created = await self.get_by_id(user_id)
        if created is None:
            raise StoreWriteError("created user could not be read back")
        return created

    async def update(self, user_id: str, changes: dict) -> UserSummary | None:
        if changes:
            result = await self._write(
                update(UserRecord).where(UserRecord.id == user_id).values(**changes)
            )
            if result.rowcount == 0:
                return None
        return await self.get_by_id(user_id)

    async def delete(self, user_id: str) -> bool:
        result = await self._write(delete(UserRecord).where(UserRecord.id == user_id))
        return result.rowcount > 0

    async def exists(self, user_id: str) -> bool:
        result = await self._read(select(UserRecord.id).where(UserRecord.id == user_id))
        return result.first() is not None
