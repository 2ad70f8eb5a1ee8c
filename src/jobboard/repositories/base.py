"""Shared session handling for the SQLAlchemy repositories."""

import logging
from typing import Any

from sqlalchemy.engine import Result
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import Executable

from src.jobboard.repositories.errors import (
    StoreReadError,
    StoreWriteError,
    UniqueViolationError,
)
from src.jobboard.repositories.list_query import ListQueryExecutor

logger = logging.getLogger(__name__)


class SqlRepository:
    """Base class wrapping one request-scoped AsyncSession.

    Reads raise StoreReadError and writes raise StoreWriteError (or
    UniqueViolationError) instead of leaking SQLAlchemy exceptions.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with a session.

        Args:
            session: Request-scoped session; writes are committed on it
        """
        self._session = session
        self._lists = ListQueryExecutor(session)

    async def _read(self, statement: Executable) -> Result[Any]:
        """Execute a read statement."""
        try:
            return await self._session.execute(statement)
        except SQLAlchemyError as e:
            logger.error("Store read failed: %s", e)
            raise StoreReadError() from e

    async def _write(self, statement: Executable) -> Result[Any]:
        """Execute a write statement and commit it."""
        try:
            result = await self._session.execute(statement)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            if "unique" in str(e.orig).lower():
                raise UniqueViolationError(str(e.orig)) from e
            logger.error("Store write rejected: %s", e.orig)
            raise StoreWriteError(str(e.orig)) from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Store write failed: %s", e)
            raise StoreWriteError() from e
        return result
