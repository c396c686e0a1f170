from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.rbac import require_admin, require_staff
from app.auth.schemas import CurrentUser
from app.core.notifications import Notifier, get_notifier
from app.core.schemas import ApiListResponse, ApiResponse, success, success_list
from app.db.session import get_db

from .schemas import LeaveRequestCreate, ReviewRequest
from . import service

router = APIRouter(prefix="/api/v1/leaves", tags=["leaves"])


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_staff)],
)
async def submit_leave_request(
    payload: LeaveRequestCreate,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    """Submit a leave request as the current coordinator. The nominated deputy is emailed."""
    leave = await service.submit_leave_request(db, notifier, current_user.staff_id, payload)
    return success("Leave request submitted successfully", leave_request=leave)


@router.get(
    "/pending",
    response_model=ApiListResponse,
    dependencies=[Depends(require_admin)],
)
async def list_pending_leave_requests(
    db: AsyncSession = Depends(get_db),
) -> ApiListResponse:
    """All pending leave requests with coordinator and deputy details. Admin only."""
    leaves = await service.list_pending_leaves(db)
    return success_list("leave_requests", leaves)


@router.patch(
    "/{leave_id}/approve",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def approve_leave_request(
    leave_id: int,
    payload: Optional[ReviewRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    comments = payload.admin_comments if payload else None
    leave = await service.approve_leave(db, notifier, leave_id, current_user, admin_comments=comments)
    return success("Leave request approved successfully", leave_request=leave)


@router.patch(
    "/{leave_id}/reject",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def reject_leave_request(
    leave_id: int,
    payload: Optional[ReviewRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    comments = payload.admin_comments if payload else None
    leave = await service.reject_leave(db, notifier, leave_id, current_user, admin_comments=comments)
    return success("Leave request rejected successfully", leave_request=leave)


@router.get(
    "/coordinator/{coordinator_id}",
    response_model=ApiListResponse,
)
async def coordinator_leave_history(
    coordinator_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiListResponse:
    """Leave history of a coordinator, newest first. Only that coordinator or an admin."""
    leaves = await service.get_leave_history(db, coordinator_id, current_user)
    return success_list("leave_requests", leaves)


@router.get(
    "/{leave_id}",
    response_model=ApiResponse,
)
async def get_leave_request(
    leave_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    """Single leave request. Visible to its coordinator, its deputy and admins."""
    leave = await service.get_leave_request(db, leave_id, current_user)
    return success(leave_request=leave)
