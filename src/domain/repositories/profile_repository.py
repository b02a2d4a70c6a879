"""Profile repository protocol."""

from typing import Protocol

from domain.entities.member import MemberView, UserParams
from domain.entities.pagination import PagedResult
from domain.entities.user import User


class IProfileRepository(Protocol):
    """Repository interface for User aggregates and member projections."""

    async def get_gender(self, username: str) -> str | None:
        """Get a user's gender, or None if the user does not exist."""
        ...

    async def get_user_by_username(self, username: str) -> User | None:
        """Get a user with its photos, tracked for mutation."""
        ...

    async def get_member(self, username: str) -> MemberView | None:
        """Get a read-only member projection."""
        ...

    async def get_members(self, params: UserParams) -> PagedResult[MemberView]:
        """Get one filtered, ordered page of member projections."""
        ...

    async def update(self, user: User) -> None:
        """Buffer the user's profile fields and photo collection for commit."""
        ...
