from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.schemas import ApiListResponse, ApiResponse, success, success_list
from app.db.session import get_db

from .schemas import LeaveStatementCreate
from . import service

router = APIRouter(prefix="/api/v1/leave-statements", tags=["leave-statements"])


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_leave_statement(
    payload: LeaveStatementCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    """Attach a note to a leave request. Its coordinator, its deputy or an admin may write."""
    statement = await service.create_statement(db, payload, current_user)
    return success("Leave statement created successfully", leave_statement=statement)


@router.get(
    "/leave-request/{leave_request_id}",
    response_model=ApiListResponse,
)
async def list_leave_statements(
    leave_request_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiListResponse:
    statements = await service.list_statements(db, leave_request_id, current_user)
    return success_list("leave_statements", statements)


@router.get(
    "/{statement_id}",
    response_model=ApiResponse,
)
async def get_leave_statement(
    statement_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    statement = await service.get_statement(db, statement_id, current_user)
    return success(leave_statement=statement)
