"""SQLAlchemy implementation of Profile repository."""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from domain.entities.member import MemberOrderBy, MemberView, UserParams
from domain.entities.pagination import PagedResult
from domain.entities.user import Photo, User, calculate_age
from infrastructure.database.models import PhotoModel, UserModel
from infrastructure.database.pagination import paginate


def _years_before(day: date, years: int) -> date:
    """Same calendar day ``years`` earlier (Feb 29 falls back to Feb 28)."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


def date_of_birth_bounds(min_age: int, max_age: int, today: date | None = None) -> tuple[date, date]:
    """Inclusive date-of-birth range for people aged ``min_age``..``max_age`` today."""
    today = today or date.today()
    earliest = date.fromordinal(_years_before(today, max_age + 1).toordinal() + 1)
    latest = _years_before(today, min_age)
    return earliest, latest


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._pending_photos: list[tuple[Photo, PhotoModel]] = []
        # Rows loaded for mutation, held so their loaded version_id survives
        # until update(); the session identity map is weak
        self._tracked: dict[UUID, UserModel] = {}

    async def get_gender(self, username: str) -> str | None:
        """Get a user's gender by username."""
        stmt = select(UserModel.gender).where(UserModel.username == username.lower())
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> User | None:
        """Get a user with photos for mutation."""
        model = await self._get_model(username)
        if not model:
            return None
        self._tracked[model.id] = model
        return self._to_entity(model)

    async def get_member(self, username: str) -> MemberView | None:
        """Get a read-only member projection."""
        model = await self._get_model(username)
        return self._to_member(model) if model else None

    async def get_members(self, params: UserParams) -> PagedResult[MemberView]:
        """Get one page of members matching the directory filters."""
        stmt = select(UserModel)

        if params.current_username:
            stmt = stmt.where(UserModel.username != params.current_username.lower())
        if params.gender:
            stmt = stmt.where(UserModel.gender == params.gender)

        earliest, latest = date_of_birth_bounds(params.min_age, params.max_age)
        stmt = stmt.where(
            UserModel.date_of_birth >= earliest,
            UserModel.date_of_birth <= latest,
        )

        if params.order_by == MemberOrderBy.CREATED:
            stmt = stmt.order_by(UserModel.created_at.desc(), UserModel.id)
        else:
            stmt = stmt.order_by(UserModel.last_active.desc(), UserModel.id)

        page = await paginate(
            self._session,
            stmt,
            params.page_number,
            params.page_size,
            options=[selectinload(UserModel.photos)],
        )
        return PagedResult(
            current_page=page.current_page,
            page_size=page.page_size,
            total_count=page.total_count,
            items=[self._to_member(model) for model in page.items],
        )

    async def update(self, user: User) -> None:
        """Buffer profile fields and photo collection changes onto tracked rows.

        Nothing is flushed here; the unit of work commits.
        """
        model = self._tracked.get(user.id)
        if model is None:
            stmt = (
                select(UserModel)
                .options(selectinload(UserModel.photos))
                .where(UserModel.id == user.id)
            )
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"User {user.id} not found")

        # Update fields
        model.known_as = user.known_as
        model.introduction = user.introduction
        model.looking_for = user.looking_for
        model.interests = user.interests
        model.city = user.city
        model.country = user.country
        model.last_active = user.last_active

        # Reconcile photos
        kept_ids = {photo.id for photo in user.photos if photo.id is not None}
        for photo_model in list(model.photos):
            if photo_model.id not in kept_ids:
                model.photos.remove(photo_model)

        by_id = {photo_model.id: photo_model for photo_model in model.photos}
        for photo in user.photos:
            if photo.id is None:
                if not any(pending is photo for pending, _ in self._pending_photos):
                    photo_model = PhotoModel(
                        url=photo.url,
                        public_id=photo.public_id,
                        is_main=photo.is_main,
                    )
                    model.photos.append(photo_model)
                    self._pending_photos.append((photo, photo_model))
            elif photo.id in by_id:
                by_id[photo.id].is_main = photo.is_main

        # Touch the aggregate root so the version check covers photo changes
        if self._session.is_modified(model) or any(
            self._session.is_modified(photo_model) for photo_model in model.photos
        ):
            model.updated_at = datetime.utcnow()

    def bind_generated_ids(self) -> None:
        """Copy database-assigned photo IDs onto their entities after commit."""
        for photo, photo_model in self._pending_photos:
            photo.id = photo_model.id
        self._pending_photos.clear()

    def discard_pending(self) -> None:
        """Forget rows and photos buffered by a transaction that did not commit."""
        self._pending_photos.clear()
        self._tracked.clear()

    async def _get_model(self, username: str) -> UserModel | None:
        stmt = (
            select(UserModel)
            .options(selectinload(UserModel.photos))
            .where(UserModel.username == username.lower())
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: UserModel) -> User:
        """Convert ORM model to domain entity."""
        return User(
            id=model.id,
            username=model.username,
            gender=model.gender,
            date_of_birth=model.date_of_birth,
            known_as=model.known_as,
            introduction=model.introduction,
            looking_for=model.looking_for,
            interests=model.interests,
            city=model.city,
            country=model.country,
            photos=[self._to_photo(photo_model) for photo_model in model.photos],
            created_at=model.created_at,
            last_active=model.last_active,
        )

    def _to_member(self, model: UserModel) -> MemberView:
        """Convert ORM model to a read-only member projection."""
        photos = [self._to_photo(photo_model) for photo_model in model.photos]
        main = next((photo for photo in photos if photo.is_main), None)
        return MemberView(
            username=model.username,
            known_as=model.known_as,
            age=calculate_age(model.date_of_birth) if model.date_of_birth else None,
            photo_url=main.url if main else None,
            gender=model.gender,
            created_at=model.created_at,
            last_active=model.last_active,
            introduction=model.introduction,
            looking_for=model.looking_for,
            interests=model.interests,
            city=model.city,
            country=model.country,
            photos=photos,
        )

    def _to_photo(self, model: PhotoModel) -> Photo:
        return Photo(
            id=model.id,
            url=model.url,
            public_id=model.public_id,
            is_main=model.is_main,
        )
