"""API routers package."""

from fastapi import APIRouter

from src.jobboard.api.routers.applications import router as applications_router
from src.jobboard.api.routers.auth import router as auth_router
from src.jobboard.api.routers.jobs import router as jobs_router
from src.jobboard.api.routers.users import router as users_router

api_router = APIRouter()

# User management, including the cached user list
api_router.include_router(users_router)

# Job postings (cached public feed, recruiter-only edits)
api_router.include_router(jobs_router)

# Job applications
api_router.include_router(applications_router)

# Bearer token demo
api_router.include_router(auth_router)
