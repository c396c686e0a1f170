from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.enums import RequestStatus
from app.core.models import Suggestion


class SuggestionRepository:
    """Storage access for suggestions. Callers commit."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _select(self):
        return select(Suggestion).options(selectinload(Suggestion.coordinator))

    async def find_by_id(self, suggestion_id: int, fresh: bool = False) -> Optional[Suggestion]:
        stmt = self._select().where(Suggestion.id == suggestion_id)
        if fresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_all(self) -> Sequence[Suggestion]:
        result = await self.db.execute(
            self._select().order_by(Suggestion.submitted_at.desc(), Suggestion.id.desc())
        )
        return result.scalars().all()

    async def find_by_coordinator(self, coordinator_id: str) -> Sequence[Suggestion]:
        result = await self.db.execute(
            self._select()
            .where(Suggestion.coordinator_id == coordinator_id)
            .order_by(Suggestion.submitted_at.desc(), Suggestion.id.desc())
        )
        return result.scalars().all()

    async def add(self, suggestion: Suggestion) -> Suggestion:
        self.db.add(suggestion)
        await self.db.flush()
        return suggestion

    async def transition(
        self,
        suggestion_id: int,
        to_status: RequestStatus,
        reviewed_by: str,
        admin_comments: Optional[str] = None,
    ) -> bool:
        result = await self.db.execute(
            update(Suggestion)
            .where(
                Suggestion.id == suggestion_id,
                Suggestion.status == RequestStatus.PENDING.value,
            )
            .values(
                status=to_status.value,
                reviewed_by=reviewed_by,
                reviewed_at=datetime.utcnow(),
                admin_comments=admin_comments,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
