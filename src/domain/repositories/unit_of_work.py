"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.profile_repository import IProfileRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    members: IProfileRepository

    async def complete(self) -> bool:
        """Commit all buffered changes atomically.

        Returns False, with nothing applied, if persistence fails.
        """
        ...

    def has_changes(self) -> bool:
        """Report whether any buffered change exists."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
