from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.rbac import require_admin
from app.auth.schemas import CurrentUser
from app.core.schemas import ApiListResponse, ApiResponse, PaginatedResponse, success, success_list
from app.db.session import get_db

from .schemas import ConnectInterfaceCreate, ConnectInterfaceUpdate
from . import service

# Every route needs a signed-in user; writes are admin only
router = APIRouter(
    prefix="/api/v1/connect-interfaces",
    tags=["connect-interfaces"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/search", response_model=PaginatedResponse)
async def search_interfaces(
    keyword: Optional[str] = Query(None, description="Matched against name, description and endpoint"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse:
    result = await service.search_interfaces(db, keyword, page=page, limit=limit)
    return PaginatedResponse(
        results=len(result.items),
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.page,
        data={"interfaces": result.items},
    )


@router.get("", response_model=ApiListResponse)
async def list_interfaces(
    db: AsyncSession = Depends(get_db),
) -> ApiListResponse:
    interfaces = await service.list_interfaces(db)
    return success_list("interfaces", interfaces)


@router.get("/{interface_id}", response_model=ApiResponse)
async def get_interface(
    interface_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    interface = await service.get_interface(db, interface_id)
    return success(interface=interface)


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_interface(
    payload: ConnectInterfaceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    interface = await service.create_interface(db, payload, current_user)
    return success("Interface created successfully", interface=interface)


@router.put(
    "/{interface_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def update_interface(
    interface_id: int,
    payload: ConnectInterfaceUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    interface = await service.update_interface(db, interface_id, payload)
    return success("Interface updated successfully", interface=interface)


@router.delete(
    "/{interface_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_interface(
    interface_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    await service.delete_interface(db, interface_id)
    return success("Interface deleted successfully")
