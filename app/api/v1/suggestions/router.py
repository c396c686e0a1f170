from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.leaves.schemas import ReviewRequest
from app.auth.dependencies import get_current_user
from app.auth.rbac import require_admin, require_staff
from app.auth.schemas import CurrentUser
from app.core.notifications import Notifier, get_notifier
from app.core.schemas import ApiListResponse, ApiResponse, success, success_list
from app.db.session import get_db

from .schemas import SuggestionCreate
from . import service

router = APIRouter(prefix="/api/v1/suggestions", tags=["suggestions"])


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_staff)],
)
async def submit_suggestion(
    payload: SuggestionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    suggestion = await service.submit_suggestion(db, current_user.staff_id, payload)
    return success("Suggestion submitted successfully", suggestion=suggestion)


@router.get(
    "/coordinator/{coordinator_id}",
    response_model=ApiListResponse,
)
async def coordinator_suggestions(
    coordinator_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiListResponse:
    """A coordinator's own suggestions, newest first. Only that coordinator or an admin."""
    suggestions = await service.get_own_suggestions(db, coordinator_id, current_user)
    return success_list("suggestions", suggestions)


@router.get(
    "",
    response_model=ApiListResponse,
    dependencies=[Depends(require_admin)],
)
async def list_suggestions(
    db: AsyncSession = Depends(get_db),
) -> ApiListResponse:
    suggestions = await service.list_all_suggestions(db)
    return success_list("suggestions", suggestions)


@router.get(
    "/{suggestion_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def get_suggestion(
    suggestion_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    suggestion = await service.get_suggestion(db, suggestion_id)
    return success(suggestion=suggestion)


@router.patch(
    "/{suggestion_id}/approve",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def approve_suggestion(
    suggestion_id: int,
    payload: Optional[ReviewRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    comments = payload.admin_comments if payload else None
    suggestion = await service.approve_suggestion(db, notifier, suggestion_id, current_user, admin_comments=comments)
    return success("Suggestion approved successfully", suggestion=suggestion)


@router.patch(
    "/{suggestion_id}/reject",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def reject_suggestion(
    suggestion_id: int,
    payload: Optional[ReviewRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    comments = payload.admin_comments if payload else None
    suggestion = await service.reject_suggestion(db, notifier, suggestion_id, current_user, admin_comments=comments)
    return success("Suggestion rejected successfully", suggestion=suggestion)
