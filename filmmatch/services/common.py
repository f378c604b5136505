"""Pagination helpers shared by list endpoints."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results."""
    items: Sequence[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


async def paginate(session: AsyncSession, query: Select, *, page: int, limit: int) -> Page:
    """Run ``query`` for one page and count the full result set.

    Args:
        session: Database session
        query: Select over a single entity, ordering already applied
        page: 1-based page number
        limit: Page size

    Returns:
        Page of ORM objects
    """
    page = max(page, 1)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await session.execute(count_query)).scalar_one()

    result = await session.execute(query.offset((page - 1) * limit).limit(limit))
    return Page(items=result.scalars().all(), total=total, page=page, limit=limit)
