from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.rbac import require_admin
from app.auth.schemas import CurrentUser
from app.core.enums import UserRole
from app.core.notifications import Notifier, get_notifier
from app.core.schemas import ApiListResponse, ApiResponse, PaginatedResponse, success, success_list
from app.db.session import get_db

from .schemas import RoleUpdate, UserCreate, UserUpdate
from . import service

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/coordinators", response_model=ApiListResponse)
async def list_coordinators(
    db: AsyncSession = Depends(get_db),
) -> ApiListResponse:
    """Public directory of active coordinators and the courses they run."""
    coordinators = await service.list_coordinators(db)
    return success_list("coordinators", coordinators)


@router.get("/coordinators/{staff_id}", response_model=ApiResponse)
async def get_coordinator(
    staff_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    coordinator = await service.get_coordinator(db, staff_id)
    return success(coordinator=coordinator)


@router.get(
    "",
    response_model=PaginatedResponse,
    dependencies=[Depends(require_admin)],
)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    role: Optional[UserRole] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse:
    result = await service.list_users(db, page=page, limit=limit, role=role)
    return PaginatedResponse(
        results=len(result.items),
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.page,
        data={"users": result.items},
    )


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    user = await service.admin_create_user(db, payload)
    return success("User created successfully", user=user)


@router.get("/{staff_id}", response_model=ApiResponse)
async def get_user(
    staff_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    user = await service.get_user(db, staff_id, current_user)
    return success(user=user)


@router.put("/{staff_id}", response_model=ApiResponse)
async def update_user(
    staff_id: str,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    """Self-or-admin profile update. Role and status changes are admin only and notify the user."""
    user = await service.update_user(db, notifier, staff_id, payload, current_user)
    return success("User updated successfully", user=user)


@router.put(
    "/{staff_id}/role",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def update_user_role(
    staff_id: str,
    payload: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
) -> ApiResponse:
    user = await service.set_role(db, notifier, staff_id, payload.role)
    return success("User role updated successfully", user=user)


@router.delete(
    "/{staff_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def deactivate_user(
    staff_id: str,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    await service.deactivate_user(db, notifier, staff_id, current_user)
    return success("User deactivated successfully")
