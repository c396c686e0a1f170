"""Notes on a leave request. Append-only: there is no update or delete path."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.v1.leaves.repository import LeaveRequestRepository
from app.api.v1.leaves.service import can_view_leave
from app.auth.schemas import CurrentUser
from app.core.exceptions import AuthorizationError, NotFoundError
from app.core.models import LeaveRequest, LeaveStatement
from app.core.schemas import PersonSummary

from .schemas import LeaveStatementCreate, LeaveStatementResponse

logger = logging.getLogger(__name__)


def _to_response(s: LeaveStatement) -> LeaveStatementResponse:
    return LeaveStatementResponse(
        id=s.id,
        leave_request_id=s.leave_request_id,
        author_id=s.author_id,
        statement_text=s.statement_text,
        created_at=s.created_at,
        author=PersonSummary.from_user(s.author),
    )


async def _get_visible_request(db: AsyncSession, leave_request_id: int, current_user: CurrentUser) -> LeaveRequest:
    req = await LeaveRequestRepository(db).find_by_id(leave_request_id)
    if not req:
        raise NotFoundError("Leave request", leave_request_id)
    if not can_view_leave(req, current_user):
        raise AuthorizationError("You do not have permission to access statements for this leave request")
    return req


async def _load_statement(db: AsyncSession, statement_id: int) -> LeaveStatement:
    result = await db.execute(
        select(LeaveStatement)
        .options(selectinload(LeaveStatement.author))
        .where(LeaveStatement.id == statement_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_statement(
    db: AsyncSession,
    payload: LeaveStatementCreate,
    current_user: CurrentUser,
) -> LeaveStatementResponse:
    await _get_visible_request(db, payload.leave_request_id, current_user)
    statement = LeaveStatement(
        leave_request_id=payload.leave_request_id,
        author_id=current_user.staff_id,
        statement_text=payload.statement_text,
    )
    db.add(statement)
    await db.commit()
    logger.info(
        "Statement %s added to leave request %s by %s",
        statement.id,
        payload.leave_request_id,
        current_user.staff_id,
    )
    return _to_response(await _load_statement(db, statement.id))


async def list_statements(
    db: AsyncSession,
    leave_request_id: int,
    current_user: CurrentUser,
) -> List[LeaveStatementResponse]:
    await _get_visible_request(db, leave_request_id, current_user)
    result = await db.execute(
        select(LeaveStatement)
        .options(selectinload(LeaveStatement.author))
        .where(LeaveStatement.leave_request_id == leave_request_id)
        .order_by(LeaveStatement.created_at.desc(), LeaveStatement.id.desc())
    )
    return [_to_response(s) for s in result.scalars().all()]


async def get_statement(
    db: AsyncSession,
    statement_id: int,
    current_user: CurrentUser,
) -> LeaveStatementResponse:
    statement = await _load_statement(db, statement_id)
    if not statement:
        raise NotFoundError("Leave statement", statement_id)
    await _get_visible_request(db, statement.leave_request_id, current_user)
    return _to_response(statement)
