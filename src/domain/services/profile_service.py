"""Profile service layer: member directory and photo management."""

from collections.abc import Callable

import structlog

from core.exceptions import (
    AlreadyMainPhotoError,
    MainPhotoDeletionError,
    PersistenceError,
    PhotoNotFoundError,
    UserNotFoundError,
)
from domain.entities.member import MemberView, UserParams
from domain.entities.pagination import PagedResult
from domain.entities.user import MemberUpdate, Photo, User, opposite_gender
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.storage.provider import IAssetStore

logger = structlog.get_logger()


class ProfileService:
    """Service layer for member profiles and photo collections.

    Every mutation runs inside a single unit of work. The asset store is not
    part of that transaction: an upload followed by a failed commit leaves an
    orphaned remote asset, and a remote removal followed by a failed commit
    leaves a dangling local reference. Both are logged, not reconciled.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        asset_store: IAssetStore,
    ) -> None:
        self._uow_factory = uow_factory
        self._assets = asset_store

    async def list_members(self, caller: str, params: UserParams) -> PagedResult[MemberView]:
        """Get a page of members, excluding the caller.

        Without an explicit gender filter, the caller sees the opposite gender
        of their own profile. Callers whose gender is neither male nor female
        get no gender filter.
        """
        async with self._uow_factory() as uow:
            if not params.gender:
                caller_gender = await uow.members.get_gender(caller)
                params.gender = opposite_gender(caller_gender)
            params.current_username = caller
            return await uow.members.get_members(params)

    async def get_member(self, username: str) -> MemberView:
        """Get a single member projection."""
        async with self._uow_factory() as uow:
            member = await uow.members.get_member(username)
            if not member:
                raise UserNotFoundError(username)
            return member

    async def update_profile(self, caller: str, update: MemberUpdate) -> None:
        """Apply the supplied profile fields. An update that changes nothing is a no-op."""
        async with self._uow_factory() as uow:
            user = await self._get_caller(uow, caller)

            if not user.apply_update(update):
                return

            await uow.members.update(user)
            if not await uow.complete():
                raise PersistenceError("Failed to update user")

    async def add_photo(self, caller: str, content: bytes, filename: str | None = None) -> Photo:
        """Upload a photo and attach it to the caller's collection.

        The first photo of an empty collection becomes the main photo.
        """
        async with self._uow_factory() as uow:
            user = await self._get_caller(uow, caller)

            uploaded = await self._assets.upload(content, filename)

            photo = user.add_photo(Photo(url=uploaded.url, public_id=uploaded.public_id))
            await uow.members.update(user)

            if not await uow.complete():
                logger.error(
                    "orphaned_asset",
                    username=user.username,
                    public_id=uploaded.public_id,
                )
                raise PersistenceError("Problem adding photo")

            logger.info(
                "photo_added",
                username=user.username,
                photo_id=photo.id,
                is_main=photo.is_main,
            )
            return photo

    async def set_main_photo(self, caller: str, photo_id: int) -> None:
        """Make ``photo_id`` the caller's only main photo."""
        async with self._uow_factory() as uow:
            user = await self._get_caller(uow, caller)
            photo = self._get_photo(user, photo_id)

            if photo.is_main:
                raise AlreadyMainPhotoError(photo_id)

            current_main = user.main_photo
            if current_main:
                current_main.is_main = False
            photo.is_main = True

            await uow.members.update(user)
            if not await uow.complete():
                raise PersistenceError("Problem setting main photo")

            logger.info("main_photo_set", username=user.username, photo_id=photo_id)

    async def delete_photo(self, caller: str, photo_id: int) -> None:
        """Delete a non-main photo from the asset store and the caller's collection."""
        async with self._uow_factory() as uow:
            user = await self._get_caller(uow, caller)
            photo = self._get_photo(user, photo_id)

            if photo.is_main:
                raise MainPhotoDeletionError(photo_id)

            # Legacy photos were stored without an asset store ID
            if photo.public_id is not None:
                await self._assets.remove(photo.public_id)

            user.photos.remove(photo)
            await uow.members.update(user)

            if not await uow.complete():
                logger.error(
                    "dangling_photo_reference",
                    username=user.username,
                    photo_id=photo_id,
                    public_id=photo.public_id,
                )
                raise PersistenceError("Problem deleting photo")

            logger.info("photo_deleted", username=user.username, photo_id=photo_id)

    async def _get_caller(self, uow: IUnitOfWork, caller: str) -> User:
        user = await uow.members.get_user_by_username(caller)
        if not user:
            raise UserNotFoundError(caller)
        return user

    @staticmethod
    def _get_photo(user: User, photo_id: int) -> Photo:
        photo = user.find_photo(photo_id)
        if not photo:
            raise PhotoNotFoundError(photo_id)
        return photo
