"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.profile_service import ProfileService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.storage.cloudinary_provider import CloudinaryAssetStore


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_asset_store() -> CloudinaryAssetStore:
    """Get asset store instance."""
    return CloudinaryAssetStore()


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory(), asset_store=get_asset_store())
