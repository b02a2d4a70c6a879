"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.user import Photo, User


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked profile repository for unit testing.

    ``complete_result`` controls what ``complete()`` reports; ``completed``
    records whether it was called at all.
    """

    def __init__(self) -> None:
        self.members = AsyncMock()
        self.complete_result = True
        self.completed = False
        self.rolled_back = False

    async def complete(self) -> bool:
        self.completed = True
        return self.complete_result

    def has_changes(self) -> bool:
        return self.members.update.await_count > 0 and not self.completed

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, exc_type: Any, *args: Any) -> None:
        if exc_type:
            self.rolled_back = True


class FakeAssetStore:
    """Asset store double with mockable upload/remove."""

    def __init__(self) -> None:
        self.upload = AsyncMock()
        self.remove = AsyncMock()


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def assets() -> FakeAssetStore:
    """Create a fresh asset store double."""
    return FakeAssetStore()


@pytest.fixture
def caller() -> User:
    """The authenticated caller with no photos."""
    return User(username="lisa", gender="female")


@pytest.fixture
def caller_with_photos(caller: User) -> User:
    """The caller with a main photo (id 1) and a second photo (id 2)."""
    caller.photos = [
        Photo(id=1, url="https://assets.test/a.jpg", public_id="members/a", is_main=True),
        Photo(id=2, url="https://assets.test/b.jpg", public_id="members/b"),
    ]
    return caller
