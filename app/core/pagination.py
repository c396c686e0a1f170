from dataclasses import dataclass
from typing import Any, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


@dataclass
class Page:
    items: List[Any]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


async def paginate(db: AsyncSession, stmt, page: int = 1, limit: int = 10) -> Page:
    """Count the filtered statement, then fetch one 1-based page of ORM rows."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar() or 0
    result = await db.execute(stmt.offset((page - 1) * limit).limit(limit))
    return Page(items=list(result.scalars().all()), total=total, page=page, limit=limit)
