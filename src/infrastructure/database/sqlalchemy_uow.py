"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_profile_repo import SQLAlchemyProfileRepository

logger = structlog.get_logger()


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    One session per unit; its transaction is the atomic commit boundary for
    every repository handed out by this unit.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._members: Optional[SQLAlchemyProfileRepository] = None

    @property
    def members(self) -> SQLAlchemyProfileRepository:
        """Get profile repository."""
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        if self._members is None:
            self._members = SQLAlchemyProfileRepository(self._session)
        return self._members

    async def complete(self) -> bool:
        """Commit all buffered changes; False (and rolled back) on any failure."""
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")

        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            logger.warning(
                "uow_commit_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            await self._session.rollback()
            if self._members:
                self._members.discard_pending()
            return False

        if self._members:
            self._members.bind_generated_ids()
        return True

    def has_changes(self) -> bool:
        """Check whether the session holds new, deleted or modified rows."""
        if not self._session:
            return False
        session = self._session
        return bool(
            session.new
            or session.deleted
            or any(session.is_modified(obj) for obj in session.dirty)
        )

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()
        if self._members:
            self._members.discard_pending()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager, discarding anything not completed."""
        if self._session:
            if exc_type:
                await self.rollback()
            elif self.has_changes():
                logger.warning("uow_discarded_changes")
                await self.rollback()
            await self._session.close()
            self._session = None
            self._members = None
