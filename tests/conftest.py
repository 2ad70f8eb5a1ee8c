"""Shared fixtures: in-memory SQLite store and an in-memory Redis double."""

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from fnmatch import fnmatchcase

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.pool import StaticPool

from src.jobboard.repositories.application_repository import ApplicationRepository
from src.jobboard.repositories.database import (
    create_engine,
    create_session_factory,
    create_tables,
)
from src.jobboard.repositories.job_repository import JobRepository
from src.jobboard.repositories.user_repository import UserRepository

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


class FakeRedis:
    """Dict-backed stand-in for ``redis.asyncio.Redis`` (strings only)."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.get_calls = 0

    async def get(self, key: str) -> str | None:
        self.get_calls += 1
        return self.store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.store[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        deleted = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                self.ttls.pop(key, None)
                deleted += 1
        return deleted

    async def scan_iter(self, match: str = "*"):
        for key in list(self.store):
            if fnmatchcase(key, match):
                yield key

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        pass


class FailingRedis:
    """Redis double whose every call fails as if the server were down."""

    def _fail(self):
        raise RedisConnectionError("Connection refused")

    async def get(self, key: str):
        self._fail()

    async def set(self, key: str, value: str, ex: int | None = None):
        self._fail()

    async def delete(self, *keys: str):
        self._fail()

    async def scan_iter(self, match: str = "*"):
        self._fail()
        yield  # pragma: no cover

    async def ping(self):
        self._fail()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    async with create_session_factory(engine)() as session:
        yield session


@pytest.fixture
def user_repository(session: AsyncSession) -> UserRepository:
    return UserRepository(session)


@pytest.fixture
def job_repository(session: AsyncSession) -> JobRepository:
    return JobRepository(session)


@pytest.fixture
def application_repository(session: AsyncSession) -> ApplicationRepository:
    return ApplicationRepository(session)


# ---------------------------------------------------------------------------
# Seed helpers
# ---------------------------------------------------------------------------


def at(minutes: int) -> datetime:
    """Deterministic timestamp ``minutes`` after BASE_TIME."""
    return BASE_TIME + timedelta(minutes=minutes)


def job_values(recruiter_id: str, **overrides) -> dict:
    """Column values for a valid job row."""
    values = {
        "title": "Backend Engineer",
        "company": "Acme",
        "location": "Remote",
        "job_type": "FULL_TIME",
        "experience_level": "MID_LEVEL",
        "salary": None,
        "description": "Build and run the hiring platform APIs.",
        "application_url": None,
        "recruiter_id": recruiter_id,
    }
    values.update(overrides)
    return values
