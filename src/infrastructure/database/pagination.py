"""SQL pagination for ordered select statements."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.base import ExecutableOption

from core.config import settings
from domain.entities.pagination import PagedResult, clamp_page_params


async def paginate(
    session: AsyncSession,
    stmt: Select[Any],
    page: int,
    page_size: int,
    options: Sequence[ExecutableOption] = (),
    max_page_size: int | None = None,
) -> PagedResult[Any]:
    """Run one page of ``stmt`` and count its full result set.

    ``stmt`` must already be filtered and deterministically ordered. The total
    is counted before OFFSET/LIMIT are applied, so a page past the end is
    simply empty. Loader ``options`` apply to the page query only.
    """
    page, page_size = clamp_page_params(
        page, page_size, max_page_size or settings.max_page_size
    )

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total_count = (await session.execute(count_stmt)).scalar_one()

    page_stmt = stmt.options(*options).offset((page - 1) * page_size).limit(page_size)
    result = await session.execute(page_stmt)

    return PagedResult(
        current_page=page,
        page_size=page_size,
        total_count=int(total_count),
        items=list(result.scalars().all()),
    )
