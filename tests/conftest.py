"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from datetime import date, datetime, timedelta
from pathlib import Path
from uuid import uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.exceptions import AssetStoreError
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base, PhotoModel, UserModel
from infrastructure.database.session import build_session_factory
from infrastructure.storage.provider import AssetUploadResult

# Test database URL (SQLite in memory, one shared connection per engine)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_USERNAME = "lisa"


class FakeAssetStore:
    """In-memory asset store recording uploads and removals."""

    def __init__(self) -> None:
        self.uploaded: dict[str, bytes] = {}
        self.removed: list[str] = []
        self.fail_with: str | None = None

    async def upload(self, content: bytes, filename: str | None = None) -> AssetUploadResult:
        if self.fail_with:
            raise AssetStoreError(self.fail_with)
        public_id = f"members/{uuid4().hex}"
        self.uploaded[public_id] = content
        return AssetUploadResult(
            url=f"https://assets.test/{public_id}.jpg",
            public_id=public_id,
        )

    async def remove(self, public_id: str) -> None:
        if self.fail_with:
            raise AssetStoreError(self.fail_with)
        self.removed.append(public_id)
        self.uploaded.pop(public_id, None)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory configured like the application's."""
    return build_session_factory(engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for seeding and assertions."""
    async with session_factory() as session:
        yield session


async def seed_user(
    session: AsyncSession,
    username: str,
    gender: str | None = "female",
    age: int = 30,
    photos: list[tuple[str, str | None, bool]] | None = None,
    last_active: datetime | None = None,
    created_at: datetime | None = None,
) -> UserModel:
    """Insert a user (and optional photos as ``(url, public_id, is_main)``)."""
    today = date.today()
    user = UserModel(
        id=uuid4(),
        username=username,
        gender=gender,
        known_as=username.title(),
        date_of_birth=date(today.year - age, 1, 1),
        created_at=created_at or datetime.utcnow(),
        last_active=last_active or datetime.utcnow(),
        city="Lisbon",
        country="Portugal",
    )
    for url, public_id, is_main in photos or []:
        user.photos.append(PhotoModel(url=url, public_id=public_id, is_main=is_main))
    session.add(user)
    await session.commit()
    return user


def minutes_ago(minutes: int) -> datetime:
    return datetime.utcnow() - timedelta(minutes=minutes)


@pytest.fixture
def asset_store() -> FakeAssetStore:
    """Create a fresh fake asset store."""
    return FakeAssetStore()


@pytest.fixture
def test_user() -> TokenUser:
    """Create the authenticated caller."""
    return TokenUser(username=TEST_USERNAME, roles=["Member"])


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
    asset_store: FakeAssetStore,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with database, auth provider and asset store overrides.

    Requests still go through bearer-token validation, so tests choose the
    caller by sending ``auth_headers`` (or their own token).
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import get_profile_service
    from domain.services.profile_service import ProfileService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    def override_get_profile_service() -> ProfileService:
        return ProfileService(test_uow_factory, asset_store=asset_store)

    def override_get_auth_provider() -> JWTAuthProvider:
        return auth_provider

    app.dependency_overrides[get_auth_provider] = override_get_auth_provider
    app.dependency_overrides[get_profile_service] = override_get_profile_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
