"""Read-only member projections and directory query parameters."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from domain.entities.user import Photo


class MemberOrderBy(StrEnum):
    """Sort orders supported by the member directory."""

    CREATED = "created"
    LAST_ACTIVE = "lastActive"


@dataclass(frozen=True)
class MemberView:
    """Projection of a User for directory display."""

    username: str
    known_as: str | None
    age: int | None
    photo_url: str | None
    gender: str | None
    created_at: datetime
    last_active: datetime
    introduction: str | None = None
    looking_for: str | None = None
    interests: str | None = None
    city: str | None = None
    country: str | None = None
    photos: list[Photo] = field(default_factory=list)


@dataclass
class UserParams:
    """Filter, sort and paging options for a directory listing."""

    gender: str | None = None
    min_age: int = 18
    max_age: int = 100
    order_by: MemberOrderBy = MemberOrderBy.LAST_ACTIVE
    page_number: int = 1
    page_size: int = 10
    current_username: str | None = None
