"""Leave submit, pending queue, approve, reject and history, with deputy/coordinator notifications."""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import ensure_self_or_admin
from app.auth.schemas import CurrentUser
from app.auth.services import find_user_by_staff_id
from app.core.enums import RequestStatus
from app.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.core.models import LeaveRequest
from app.core.notifications import Notifier, notify_safely
from app.core.schemas import PersonSummary

from .repository import LeaveRequestRepository
from .schemas import LeaveRequestCreate, LeaveRequestResponse

logger = logging.getLogger(__name__)

ALREADY_PROCESSED_MESSAGE = "This leave request has already been processed"


def _request_to_response(r: LeaveRequest) -> LeaveRequestResponse:
    return LeaveRequestResponse(
        id=r.id,
        coordinator_id=r.coordinator_id,
        deputy_id=r.deputy_id,
        course_code=r.course_code,
        duties=r.duties,
        start_date=r.start_date,
        end_date=r.end_date,
        is_short_leave=r.is_short_leave,
        status=r.status,
        admin_comments=r.admin_comments,
        reviewed_by=r.reviewed_by,
        reviewed_at=r.reviewed_at,
        created_at=r.created_at,
        updated_at=r.updated_at,
        coordinator=PersonSummary.from_user(r.coordinator),
        deputy=PersonSummary.from_user(r.deputy),
    )


def _leave_type(r: LeaveRequest) -> str:
    return "Short Leave" if r.is_short_leave else "Regular Leave"


def _name_or_id(user, staff_id: Optional[str]) -> str:
    if user is not None:
        return user.full_name
    return staff_id or "N/A"


async def _notify_deputy_of_submission(notifier: Notifier, r: LeaveRequest) -> None:
    if r.deputy is None:
        return
    body = (
        f"You have been assigned as a deputy coordinator for {r.course_code or 'N/A'}.\n\n"
        "Leave Request Details:\n"
        f"- Coordinator: {_name_or_id(r.coordinator, r.coordinator_id)}\n"
        f"- Course: {r.course_code or 'N/A'}\n"
        f"- Start Date: {r.start_date.isoformat()}\n"
        f"- End Date: {r.end_date.isoformat()}\n"
        f"- Duties: {r.duties or 'N/A'}\n"
        f"- Type: {_leave_type(r)}\n\n"
        "Please review this request in the system."
    )
    await notify_safely(notifier, r.deputy.email, f"New Leave Request - {r.course_code or 'N/A'}", body)


async def _notify_parties_of_review(notifier: Notifier, r: LeaveRequest) -> None:
    """Both parties are best-effort: anyone without a resolvable email is skipped."""
    verb = r.status  # approved | rejected
    subject = f"Leave Request {verb.capitalize()} - {r.course_code or 'N/A'}"
    details = (
        f"- Course: {r.course_code or 'N/A'}\n"
        f"- Start Date: {r.start_date.isoformat()}\n"
        f"- End Date: {r.end_date.isoformat()}\n"
        f"- Type: {_leave_type(r)}"
    )
    comments = f"\n\nAdmin comments: {r.admin_comments}" if r.admin_comments else ""

    if r.coordinator is not None:
        body = (
            f"Your leave request has been {verb}.\n\n"
            "Leave Request Details:\n"
            f"{details}\n"
            f"- Deputy: {_name_or_id(r.deputy, r.deputy_id)}"
            f"{comments}"
        )
        await notify_safely(notifier, r.coordinator.email, subject, body)

    if r.deputy is not None:
        body = (
            f"The leave request you were assigned to has been {verb}.\n\n"
            "Leave Request Details:\n"
            f"- Coordinator: {_name_or_id(r.coordinator, r.coordinator_id)}\n"
            f"{details}"
        )
        await notify_safely(notifier, r.deputy.email, subject, body)


async def submit_leave_request(
    db: AsyncSession,
    notifier: Notifier,
    coordinator_id: str,
    payload: LeaveRequestCreate,
) -> LeaveRequestResponse:
    """Create a PENDING request for the caller; the deputy is told once the row is committed."""
    if payload.end_date <= payload.start_date:
        raise ValidationError.for_field("end_date", "End date must be after start date")
    if payload.deputy_id == coordinator_id:
        raise ValidationError.for_field("deputy_id", "Deputy cannot be the requesting coordinator")
    deputy = await find_user_by_staff_id(db, payload.deputy_id)
    if not deputy or not deputy.is_active:
        raise ValidationError.for_field("deputy_id", f"No active staff member with ID {payload.deputy_id}")

    repo = LeaveRequestRepository(db)
    req = LeaveRequest(
        coordinator_id=coordinator_id,
        deputy_id=payload.deputy_id,
        course_code=payload.course_code.strip() if payload.course_code else None,
        duties=payload.duties,
        start_date=payload.start_date,
        end_date=payload.end_date,
        is_short_leave=payload.is_short_leave,
        status=RequestStatus.PENDING.value,
    )
    await repo.add(req)
    await db.commit()
    logger.info("Leave request %s submitted by %s (deputy %s)", req.id, coordinator_id, payload.deputy_id)

    saved = await repo.find_by_id(req.id, fresh=True)
    await _notify_deputy_of_submission(notifier, saved)
    return _request_to_response(saved)


async def _review_leave(
    db: AsyncSession,
    notifier: Notifier,
    leave_id: int,
    reviewer: CurrentUser,
    to_status: RequestStatus,
    admin_comments: Optional[str],
) -> LeaveRequestResponse:
    repo = LeaveRequestRepository(db)
    req = await repo.find_by_id(leave_id)
    if not req:
        raise NotFoundError("Leave request", leave_id)
    if req.status != RequestStatus.PENDING.value:
        raise ConflictError(ALREADY_PROCESSED_MESSAGE)

    moved = await repo.transition(leave_id, to_status, reviewer.staff_id, admin_comments)
    if not moved:
        # A concurrent review committed between our read and write
        await db.rollback()
        raise ConflictError(ALREADY_PROCESSED_MESSAGE)
    await db.commit()
    logger.info("Leave request %s %s by %s", leave_id, to_status.value, reviewer.staff_id)

    updated = await repo.find_by_id(leave_id, fresh=True)
    await _notify_parties_of_review(notifier, updated)
    return _request_to_response(updated)


async def approve_leave(
    db: AsyncSession,
    notifier: Notifier,
    leave_id: int,
    reviewer: CurrentUser,
    admin_comments: Optional[str] = None,
) -> LeaveRequestResponse:
    return await _review_leave(db, notifier, leave_id, reviewer, RequestStatus.APPROVED, admin_comments)


async def reject_leave(
    db: AsyncSession,
    notifier: Notifier,
    leave_id: int,
    reviewer: CurrentUser,
    admin_comments: Optional[str] = None,
) -> LeaveRequestResponse:
    return await _review_leave(db, notifier, leave_id, reviewer, RequestStatus.REJECTED, admin_comments)


async def list_pending_leaves(db: AsyncSession) -> List[LeaveRequestResponse]:
    """All PENDING requests in submission order, with coordinator and deputy identity."""
    rows = await LeaveRequestRepository(db).find_pending()
    return [_request_to_response(r) for r in rows]


async def get_leave_history(
    db: AsyncSession,
    coordinator_id: str,
    current_user: CurrentUser,
) -> List[LeaveRequestResponse]:
    coordinator_id = coordinator_id.strip()
    ensure_self_or_admin(
        current_user,
        coordinator_id,
        "You do not have permission to view other coordinators' leave records",
    )
    rows = await LeaveRequestRepository(db).find_by_coordinator(coordinator_id)
    return [_request_to_response(r) for r in rows]


def can_view_leave(req: LeaveRequest, current_user: CurrentUser) -> bool:
    return current_user.is_admin or current_user.staff_id in (req.coordinator_id, req.deputy_id)


async def get_leave_request(
    db: AsyncSession,
    leave_id: int,
    current_user: CurrentUser,
) -> LeaveRequestResponse:
    req = await LeaveRequestRepository(db).find_by_id(leave_id)
    if not req:
        raise NotFoundError("Leave request", leave_id)
    if not can_view_leave(req, current_user):
        raise AuthorizationError("You do not have permission to view this leave request")
    return _request_to_response(req)
