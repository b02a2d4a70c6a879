"""User and Photo domain entities."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID, uuid4


class Gender(StrEnum):
    """Genders the directory knows how to pair for default filtering."""

    MALE = "male"
    FEMALE = "female"


def opposite_gender(gender: str | None) -> str | None:
    """Return the opposite of a binary gender, or None when there isn't one."""
    if gender == Gender.MALE:
        return Gender.FEMALE.value
    if gender == Gender.FEMALE:
        return Gender.MALE.value
    return None


def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    """Whole years elapsed since ``date_of_birth``."""
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


@dataclass
class Photo:
    """Domain entity for a member photo.

    ``id`` stays ``None`` until the owning unit of work commits.
    ``public_id`` is the asset store identifier; legacy records may lack one.
    """

    url: str
    public_id: str | None = None
    is_main: bool = False
    id: int | None = None


@dataclass
class MemberUpdate:
    """Optional profile fields; ``None`` means the field was not supplied."""

    introduction: str | None = None
    looking_for: str | None = None
    interests: str | None = None
    city: str | None = None
    country: str | None = None


@dataclass
class User:
    """Domain entity for a directory member and its photo collection."""

    username: str
    id: UUID = field(default_factory=uuid4)
    gender: str | None = None
    date_of_birth: date | None = None
    known_as: str | None = None
    introduction: str | None = None
    looking_for: str | None = None
    interests: str | None = None
    city: str | None = None
    country: str | None = None
    photos: list[Photo] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    last_active: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        self.username = self.username.lower()

    @property
    def age(self) -> int | None:
        if self.date_of_birth is None:
            return None
        return calculate_age(self.date_of_birth)

    @property
    def main_photo(self) -> Photo | None:
        return next((p for p in self.photos if p.is_main), None)

    def find_photo(self, photo_id: int) -> Photo | None:
        """Find a photo in this user's collection by ID."""
        return next((p for p in self.photos if p.id == photo_id), None)

    def add_photo(self, photo: Photo) -> Photo:
        """Append a photo; the first photo of an empty collection becomes main."""
        photo.is_main = len(self.photos) == 0
        self.photos.append(photo)
        return photo

    def apply_update(self, update: MemberUpdate) -> bool:
        """Merge the supplied fields of ``update`` onto this user.

        Returns True if any field value actually changed.
        """
        changed = False
        if update.introduction is not None and update.introduction != self.introduction:
            self.introduction = update.introduction
            changed = True
        if update.looking_for is not None and update.looking_for != self.looking_for:
            self.looking_for = update.looking_for
            changed = True
        if update.interests is not None and update.interests != self.interests:
            self.interests = update.interests
            changed = True
        if update.city is not None and update.city != self.city:
            self.city = update.city
            changed = True
        if update.country is not None and update.country != self.country:
            self.country = update.country
            changed = True
        return changed
