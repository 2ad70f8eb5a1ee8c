"""Tests for the HTTP surface: envelopes, status codes and error mapping.

Most tests replace services with mocks through FastAPI dependency
overrides, so no database or Redis is involved. TestCachedListRoundTrip
runs the real lifespan against a SQLite file and an in-memory Redis double.
"""

import logging
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import FakeRedis
from fastapi.testclient import TestClient

from src.jobboard.api.dependencies import (
    get_application_service,
    get_job_service,
    get_user_service,
)
from src.jobboard.config import Settings, get_settings
from src.jobboard.domain.application import (
    ApplicationDetail,
    ApplicationJobDetail,
    ApplicationStatus,
    CandidateRef,
)
from src.jobboard.domain.job import JobDetail, JobSummary
from src.jobboard.domain.pagination import MAX_OFFSET, ListQuery, PaginatedResult
from src.jobboard.domain.user import Role, UserRef, UserSummary
from src.jobboard.main import create_app
from src.jobboard.repositories.errors import StoreReadError
from src.jobboard.services.application_service import (
    ApplicationExistsError,
    ApplicationService,
)
from src.jobboard.services.job_service import (
    JobOwnershipError,
    JobService,
    JobValidationError,
)
from src.jobboard.services.user_service import (
    UserExistsError,
    UserNotFoundError,
    UserService,
)
from src.jobboard.utils.tokens import create_access_token

NOW = datetime(2024, 5, 1, 9, 30, tzinfo=UTC)
RECRUITER_ID = "7b1a53a4-6f0e-4f55-9a55-1d2f0c4b9e10"
JOB_ID = "0c9f3f5e-2f7a-4a44-8f0e-6a1d1f6b2c33"
SECRET = "api-test-secret-0123456789abcdef0123"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _user(**overrides) -> UserSummary:
    data = {
        "id": RECRUITER_ID,
        "email": "alice@example.com",
        "name": "Alice",
        "role": Role.RECRUITER,
        "created_at": NOW,
    }
    data.update(overrides)
    return UserSummary(**data)


def _job() -> JobDetail:
    return JobDetail(
        id=JOB_ID,
        title="Backend Engineer",
        company="Acme",
        location="Remote",
        job_type="FULL_TIME",
        experience_level="SENIOR",
        description="Build and run the hiring platform APIs.",
        posted_at=NOW,
        recruiter=UserRef(id=RECRUITER_ID, name="Alice", email="alice@example.com"),
    )


def _page(items: list, total: int, page: int = 1, limit: int = 10) -> PaginatedResult:
    return PaginatedResult.build(items, total, ListQuery(page=page, limit=limit))


def _token(settings: Settings, user_id: str = RECRUITER_ID, **overrides) -> str:
    claims = {"id": user_id, "email": "alice@example.com", "role": "RECRUITER"}
    return create_access_token(
        claims,
        overrides.get("secret", settings.jwt_secret),
        settings.jwt_algorithm,
        overrides.get("expires_minutes", 60),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="development", jwt_secret=SECRET)


@pytest.fixture
def user_service() -> MagicMock:
    return MagicMock(spec=UserService)


@pytest.fixture
def job_service() -> MagicMock:
    return MagicMock(spec=JobService)


@pytest.fixture
def application_service() -> MagicMock:
    return MagicMock(spec=ApplicationService)


@pytest.fixture
def app(settings, user_service, job_service, application_service):
    app = create_app(settings)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_job_service] = lambda: job_service
    app.dependency_overrides[get_application_service] = lambda: application_service
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


# ===================================================================
# List endpoints
# ===================================================================


class TestUserLists:
    def test_envelope_shape(self, client: TestClient, user_service: MagicMock) -> None:
        user_service.list_users = AsyncMock(return_value=_page([_user()], 1))

        response = client.get("/api/users")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["pagination"] == {
            "page": 1,
            "limit": 10,
            "total": 1,
            "totalPages": 1,
        }
        item = body["data"]["items"][0]
        assert item["email"] == "alice@example.com"
        assert item["createdAt"].startswith("2024-05-01T09:30")
        assert item["counts"] == {"postedJobs": 0, "applications": 0}

    def test_out_of_range_pagination_is_clamped(
        self, client: TestClient, user_service: MagicMock
    ) -> None:
        user_service.list_users = AsyncMock(return_value=_page([], 0, limit=100))

        response = client.get("/api/users", params={"page": "0", "limit": "500"})

        assert response.status_code == 200
        query = user_service.list_users.call_args.args[0]
        assert (query.page, query.limit) == (1, 100)

    def test_huge_page_is_clamped(self, client: TestClient, user_service: MagicMock) -> None:
        user_service.list_users = AsyncMock(return_value=_page([], 0))

        response = client.get("/api/users", params={"page": "99999999999999999999"})

        assert response.status_code == 200
        query = user_service.list_users.call_args.args[0]
        assert query.offset <= MAX_OFFSET

    def test_non_numeric_pagination_is_not_an_error(
        self, client: TestClient, user_service: MagicMock
    ) -> None:
        user_service.list_users = AsyncMock(return_value=_page([], 0))

        response = client.get("/api/users", params={"page": "two", "limit": "lots"})

        assert response.status_code == 200
        query = user_service.list_users.call_args.args[0]
        assert (query.page, query.limit) == (1, 10)

    def test_role_filter_forwarded(
        self, client: TestClient, user_service: MagicMock
    ) -> None:
        user_service.list_users = AsyncMock(return_value=_page([], 0))

        client.get("/api/users", params={"role": "RECRUITER", "ignored": "x"})

        query = user_service.list_users.call_args.args[0]
        assert query.filters == {"role": "RECRUITER"}

    def test_empty_result(self, client: TestClient, user_service: MagicMock) -> None:
        user_service.list_users = AsyncMock(return_value=_page([], 0))

        data = client.get("/api/users").json()["data"]

        assert data["items"] == []
        assert data["pagination"]["total"] == 0
        assert data["pagination"]["totalPages"] == 0

    def test_cached_endpoint_reports_cache_status(
        self, client: TestClient, user_service: MagicMock, settings: Settings
    ) -> None:
        page = _page([_user()], 1)
        user_service.list_users_cached = AsyncMock(
            side_effect=[(page, False), (page, True)]
        )
        params = {"role": "RECRUITER", "page": "1", "limit": "10"}

        first = client.get("/api/users/cached", params=params).json()
        second = client.get("/api/users/cached", params=params).json()

        assert first["meta"]["cached"] is False
        assert second["meta"]["cached"] is True
        assert second["meta"]["ttlSeconds"] == settings.cache_ttl_seconds
        assert second["meta"]["responseTimeMs"] >= 0
        assert second["message"] == "Users fetched from cache"
        assert second["data"] == first["data"]

    def test_invalidate_cache(
        self, client: TestClient, user_service: MagicMock, caplog
    ) -> None:
        user_service.invalidate_list_cache = AsyncMock(return_value=4)
        caplog.set_level(logging.INFO, logger="src.jobboard.api.routers.users")

        response = client.delete("/api/users/cached")

        assert response.status_code == 200
        assert response.json()["data"] == {"deletedKeys": 4}
        assert "Manual flush of cached user lists removed 4 key(s)" in caplog.text

    def test_store_failure_is_500(
        self, client: TestClient, user_service: MagicMock
    ) -> None:
        user_service.list_users = AsyncMock(side_effect=StoreReadError())

        response = client.get("/api/users")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "DATABASE_ERROR"


class TestJobList:
    def test_filters_and_meta(self, client: TestClient, job_service: MagicMock) -> None:
        summary = JobSummary(**_job().model_dump(exclude={"applications"}))
        job_service.list_jobs = AsyncMock(return_value=(_page([summary], 1), False))

        response = client.get(
            "/api/jobs",
            params={"jobType": "FULL_TIME", "experienceLevel": "", "recruiterId": RECRUITER_ID},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["cached"] is False
        assert body["data"]["items"][0]["jobType"] == "FULL_TIME"
        assert body["data"]["items"][0]["recruiter"]["id"] == RECRUITER_ID
        query = job_service.list_jobs.call_args.args[0]
        assert query.filters == {"jobType": "FULL_TIME", "recruiterId": RECRUITER_ID}

    def test_invalidate_cache(
        self, client: TestClient, job_service: MagicMock, caplog
    ) -> None:
        job_service.invalidate_list_cache = AsyncMock(return_value=2)
        caplog.set_level(logging.INFO, logger="src.jobboard.api.routers.jobs")

        response = client.delete("/api/jobs/cached")

        assert response.status_code == 200
        assert response.json()["data"] == {"deletedKeys": 2}
        assert "Manual flush of cached job lists removed 2 key(s)" in caplog.text


# ===================================================================
# User CRUD
# ===================================================================


class TestUserCrud:
    def test_create_returns_201(self, client: TestClient, user_service: MagicMock) -> None:
        user_service.create = AsyncMock(return_value=_user())

        response = client.post(
            "/api/users",
            json={"email": "alice@example.com", "name": "Alice", "role": "RECRUITER"},
        )

        assert response.status_code == 201
        assert response.json()["data"]["id"] == RECRUITER_ID

    def test_invalid_body_is_400_with_details(
        self, client: TestClient, user_service: MagicMock
    ) -> None:
        response = client.post("/api/users", json={"email": "not-an-email", "role": "BOSS"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "VALIDATION_ERROR"
        fields = {detail["field"] for detail in body["details"]}
        assert {"email", "role"} <= fields
        user_service.create.assert_not_called()

    def test_empty_update_is_400(self, client: TestClient) -> None:
        response = client.put(f"/api/users/{RECRUITER_ID}", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_duplicate_email_is_409(
        self, client: TestClient, user_service: MagicMock
    ) -> None:
        user_service.create = AsyncMock(
            side_effect=UserExistsError("User with email 'alice@example.com' already exists")
        )

        response = client.post("/api/users", json={"email": "alice@example.com"})

        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"
        assert "alice@example.com" in response.json()["message"]

    def test_missing_user_is_404(self, client: TestClient, user_service: MagicMock) -> None:
        user_service.get = AsyncMock(side_effect=UserNotFoundError("User 'ghost' not found"))

        response = client.get("/api/users/ghost")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "User 'ghost' not found",
            "error": "NOT_FOUND",
            "details": None,
        }

    def test_delete(self, client: TestClient, user_service: MagicMock) -> None:
        user_service.delete = AsyncMock(return_value=None)

        response = client.delete(f"/api/users/{RECRUITER_ID}")

        assert response.status_code == 200
        assert response.json()["data"] == {"id": RECRUITER_ID}


# ===================================================================
# Jobs: validation and ownership
# ===================================================================


class TestJobWrites:
    def test_unknown_recruiter_is_400(
        self, client: TestClient, job_service: MagicMock
    ) -> None:
        job_service.create = AsyncMock(side_effect=JobValidationError("Recruiter not found"))

        response = client.post(
            "/api/jobs",
            json={
                "title": "Backend Engineer",
                "company": "Acme",
                "location": "Remote",
                "jobType": "FULL_TIME",
                "experienceLevel": "SENIOR",
                "description": "Build and run the hiring platform APIs.",
                "recruiterId": RECRUITER_ID,
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_update_requires_token(self, client: TestClient, job_service: MagicMock) -> None:
        response = client.put(f"/api/jobs/{JOB_ID}", json={"title": "New"})

        assert response.status_code == 401
        assert response.json()["error"] == "AUTHENTICATION_ERROR"
        job_service.update.assert_not_called()

    def test_update_by_owner(
        self, client: TestClient, job_service: MagicMock, settings: Settings
    ) -> None:
        job_service.update = AsyncMock(return_value=_job())

        response = client.put(
            f"/api/jobs/{JOB_ID}",
            json={"title": "New"},
            headers={"Authorization": f"Bearer {_token(settings)}"},
        )

        assert response.status_code == 200
        assert job_service.update.call_args.kwargs["actor_id"] == RECRUITER_ID

    def test_delete_by_non_owner_is_403(
        self, client: TestClient, job_service: MagicMock, settings: Settings
    ) -> None:
        job_service.delete = AsyncMock(
            side_effect=JobOwnershipError("You can only modify jobs you posted")
        )

        response = client.delete(
            f"/api/jobs/{JOB_ID}",
            headers={"Authorization": f"Bearer {_token(settings, user_id='someone-else')}"},
        )

        assert response.status_code == 403
        assert response.json()["error"] == "AUTHORIZATION_ERROR"

    def test_mine_uses_token_identity(
        self, client: TestClient, job_service: MagicMock, settings: Settings
    ) -> None:
        job_service.list_for_recruiter = AsyncMock(return_value=_page([], 0))

        response = client.get(
            "/api/jobs/mine",
            headers={"Authorization": f"Bearer {_token(settings)}"},
        )

        assert response.status_code == 200
        assert job_service.list_for_recruiter.call_args.args[0] == RECRUITER_ID


# ===================================================================
# Applications
# ===================================================================


class TestApplications:
    def test_duplicate_is_409(
        self, client: TestClient, application_service: MagicMock
    ) -> None:
        application_service.apply = AsyncMock(
            side_effect=ApplicationExistsError("Candidate has already applied to this job")
        )

        response = client.post(
            "/api/applications",
            json={"jobId": JOB_ID, "candidateId": RECRUITER_ID},
        )

        assert response.status_code == 409

    def test_invalid_status_is_400(self, client: TestClient) -> None:
        response = client.patch(f"/api/applications/{JOB_ID}", json={"status": "HIRED"})
        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "status"

    def test_get_detail(self, client: TestClient, application_service: MagicMock) -> None:
        job = _job()
        application_service.get = AsyncMock(
            return_value=ApplicationDetail(
                id="a-1",
                status=ApplicationStatus.PENDING,
                applied_at=NOW,
                job=ApplicationJobDetail(
                    **job.model_dump(
                        include={
                            "id",
                            "title",
                            "company",
                            "location",
                            "job_type",
                            "experience_level",
                            "salary",
                            "description",
                            "application_url",
                            "recruiter",
                        }
                    )
                ),
                candidate=CandidateRef(
                    id="c-1", name="Cara", email="cara@example.com", role=Role.CANDIDATE
                ),
            )
        )

        body = client.get("/api/applications/a-1").json()

        assert body["data"]["status"] == "PENDING"
        assert body["data"]["job"]["recruiter"]["email"] == "alice@example.com"
        assert body["data"]["candidate"]["role"] == "CANDIDATE"


# ===================================================================
# Auth and framework errors
# ===================================================================


class TestProtectedRoute:
    def test_missing_header_is_401(self, client: TestClient) -> None:
        response = client.get("/api/auth/protected")
        assert response.status_code == 401
        assert response.json()["message"] == "Authorization header missing"

    def test_bad_signature_is_403(self, client: TestClient, settings: Settings) -> None:
        token = _token(settings, secret="some-other-secret-0123456789abcdef01")
        response = client.get(
            "/api/auth/protected", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Invalid or expired token"

    def test_expired_token_is_403(self, client: TestClient, settings: Settings) -> None:
        token = _token(settings, expires_minutes=-5)
        response = client.get(
            "/api/auth/protected", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 403

    def test_valid_token_returns_claims(
        self, client: TestClient, settings: Settings
    ) -> None:
        response = client.get(
            "/api/auth/protected",
            headers={"Authorization": f"Bearer {_token(settings)}"},
        )
        assert response.status_code == 200
        assert response.json()["data"]["user"] == {
            "id": RECRUITER_ID,
            "email": "alice@example.com",
            "role": "RECRUITER",
        }


class TestFrameworkErrors:
    def test_unknown_route_uses_envelope(self, client: TestClient) -> None:
        response = client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.json()["success"] is False
        assert response.json()["error"] == "NOT_FOUND"

    def test_method_not_allowed(self, client: TestClient) -> None:
        response = client.patch("/api/users")
        assert response.status_code == 405
        assert response.json()["error"] == "METHOD_NOT_ALLOWED"

    def test_unexpected_error_is_500(
        self, client: TestClient, user_service: MagicMock
    ) -> None:
        user_service.get = AsyncMock(side_effect=RuntimeError("boom"))

        response = client.get(f"/api/users/{RECRUITER_ID}")

        assert response.status_code == 500
        assert response.json()["error"] == "INTERNAL_ERROR"
        assert response.json()["message"] == "boom"

    def test_health_without_redis(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "cache": "unavailable"}


class TestProductionMasking:
    @pytest.fixture
    def settings(self) -> Settings:
        return Settings(environment="production", jwt_secret=SECRET)

    def test_not_found_message_is_generic(
        self, client: TestClient, user_service: MagicMock
    ) -> None:
        user_service.get = AsyncMock(side_effect=UserNotFoundError("User 'x' not found"))

        body = client.get("/api/users/x").json()

        assert body["message"] == "Resource not found"
        assert body["error"] == "NOT_FOUND"

    def test_internal_error_hides_exception(
        self, client: TestClient, user_service: MagicMock
    ) -> None:
        user_service.get = AsyncMock(side_effect=RuntimeError("secret stack detail"))

        body = client.get("/api/users/x").json()

        assert body["message"] == "An internal server error occurred"
        assert "secret" not in body["message"]


# ===================================================================
# Real stack: lifespan, SQLite store, ListCache
# ===================================================================


class TestCachedListRoundTrip:
    @pytest.fixture
    def fake_redis(self, monkeypatch) -> FakeRedis:
        fake = FakeRedis()
        monkeypatch.setattr(
            "src.jobboard.main.Redis",
            MagicMock(from_url=MagicMock(return_value=fake)),
        )
        return fake

    @pytest.fixture
    def live_client(self, tmp_path, fake_redis: FakeRedis):
        settings = Settings(
            environment="test",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'jobboard.db'}",
            jwt_secret=SECRET,
        )
        app = create_app(settings)
        app.dependency_overrides[get_settings] = lambda: settings
        with TestClient(app) as client:
            yield client

    def _register(self, client: TestClient, email: str) -> None:
        response = client.post("/api/users", json={"email": email})
        assert response.status_code == 201

    def test_second_request_served_from_cache(
        self, live_client: TestClient, fake_redis: FakeRedis
    ) -> None:
        self._register(live_client, "ann@example.com")
        self._register(live_client, "bob@example.com")
        params = {"page": "1", "limit": "5"}

        first = live_client.get("/api/users/cached", params=params).json()
        second = live_client.get("/api/users/cached", params=params).json()

        assert first["meta"]["cached"] is False
        assert first["message"] == "Users fetched from database"
        assert second["meta"]["cached"] is True
        assert second["message"] == "Users fetched from cache"
        assert second["data"] == first["data"]
        assert first["data"]["pagination"]["total"] == 2
        assert list(fake_redis.store) == ["jobboard:users:list:all:page:1:limit:5"]
        assert fake_redis.ttls["jobboard:users:list:all:page:1:limit:5"] == 60

    def test_write_drops_cached_pages(
        self, live_client: TestClient, fake_redis: FakeRedis
    ) -> None:
        self._register(live_client, "ann@example.com")
        live_client.get("/api/users/cached")
        assert fake_redis.store

        self._register(live_client, "bob@example.com")
        body = live_client.get("/api/users/cached").json()

        assert body["meta"]["cached"] is False
        assert body["data"]["pagination"]["total"] == 2

    def test_huge_page_is_an_empty_page(self, live_client: TestClient) -> None:
        self._register(live_client, "ann@example.com")

        for path in ("/api/users", "/api/users/cached", "/api/jobs", "/api/applications"):
            response = live_client.get(path, params={"page": "99999999999999999999"})
            assert response.status_code == 200, path
            assert response.json()["data"]["items"] == []

    def test_health_reports_cache(self, live_client: TestClient) -> None:
        assert live_client.get("/health").json() == {
            "status": "healthy",
            "cache": "connected",
        }
