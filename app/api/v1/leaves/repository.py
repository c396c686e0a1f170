from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.enums import RequestStatus
from app.core.models import LeaveRequest


class LeaveRequestRepository:
    """
    Storage access for leave requests.

    - Does not commit; the service owns the transaction.
    - Finders eager-load coordinator and deputy so responses can show both parties.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _select(self):
        return select(LeaveRequest).options(
            selectinload(LeaveRequest.coordinator),
            selectinload(LeaveRequest.deputy),
        )

    async def find_by_id(self, leave_id: int, fresh: bool = False) -> Optional[LeaveRequest]:
        stmt = self._select().where(LeaveRequest.id == leave_id)
        if fresh:
            # Overwrite identity-map copies after a bulk UPDATE
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_pending(self) -> Sequence[LeaveRequest]:
        result = await self.db.execute(
            self._select()
            .where(LeaveRequest.status == RequestStatus.PENDING.value)
            .order_by(LeaveRequest.created_at.asc(), LeaveRequest.id.asc())
        )
        return result.scalars().all()

    async def find_by_coordinator(self, coordinator_id: str) -> Sequence[LeaveRequest]:
        result = await self.db.execute(
            self._select()
            .where(LeaveRequest.coordinator_id == coordinator_id)
            .order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
        )
        return result.scalars().all()

    async def add(self, leave: LeaveRequest) -> LeaveRequest:
        self.db.add(leave)
        await self.db.flush()
        return leave

    async def transition(
        self,
        leave_id: int,
        to_status: RequestStatus,
        reviewed_by: str,
        admin_comments: Optional[str] = None,
    ) -> bool:
        """Conditional write: only a PENDING row moves. False means another review got there first."""
        now = datetime.utcnow()
        result = await self.db.execute(
            update(LeaveRequest)
            .where(
                LeaveRequest.id == leave_id,
                LeaveRequest.status == RequestStatus.PENDING.value,
            )
            .values(
                status=to_status.value,
                reviewed_by=reviewed_by,
                reviewed_at=now,
                admin_comments=admin_comments,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

