# Repositories package (data access abstraction)

from src.jobboard.repositories.application_repository import ApplicationRepository
from src.jobboard.repositories.errors import (
    StoreError,
    StoreReadError,
    StoreWriteError,
    UniqueViolationError,
)
from src.jobboard.repositories.job_repository import JobRepository
from src.jobboard.repositories.list_query import ListQueryExecutor
from src.jobboard.repositories.user_repository import UserRepository

__all__ = [
    "ApplicationRepository",
    "JobRepository",
    "ListQueryExecutor",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "UniqueViolationError",
    "UserRepository",
]
