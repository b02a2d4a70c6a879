"""Database engine and session factory."""

from typing import Any, AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import settings


def engine_options(database_url: str) -> dict[str, Any]:
    """Engine keyword arguments appropriate for ``database_url``'s backend."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        return {"echo": settings.debug}

    connect_args: dict[str, Any] = {}
    # Transaction-mode poolers (PgBouncer, Supavisor) break asyncpg's
    # prepared statement cache
    if "pooler" in database_url or url.query.get("pgbouncer") == "true":
        connect_args["statement_cache_size"] = 0

    return {
        "echo": settings.debug,
        "pool_pre_ping": True,
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "connect_args": connect_args,
    }


def build_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, **engine_options(database_url))


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions never expire loaded rows on commit; entities outlive the unit of work."""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.async_database_url)
async_session_factory = build_session_factory(engine)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency yielding a session for read-only checks (e.g. health)."""
    async with async_session_factory() as session:
        yield session
