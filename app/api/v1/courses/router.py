from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.schemas import ApiListResponse, ApiResponse, PaginatedResponse, success, success_list
from app.db.session import get_db

from .schemas import CourseCreate, CourseUpdate
from . import service

router = APIRouter(prefix="/api/v1/courses", tags=["courses"])


@router.get("", response_model=ApiListResponse)
async def list_courses(
    db: AsyncSession = Depends(get_db),
) -> ApiListResponse:
    """All courses with their coordinator. Public."""
    courses = await service.list_courses(db)
    return success_list("courses", courses)


@router.get("/search", response_model=PaginatedResponse)
async def search_courses(
    query: Optional[str] = Query(None, description="Matched against course code, name and major"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse:
    result = await service.search_courses(db, query, page=page, limit=limit)
    return PaginatedResponse(
        results=len(result.items),
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.page,
        data={"courses": result.items},
    )


@router.get("/coordinator/{staff_id}", response_model=ApiListResponse)
async def courses_by_coordinator(
    staff_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiListResponse:
    courses = await service.get_courses_by_coordinator(db, staff_id)
    return success_list("courses", courses)


@router.get("/{course_id}", response_model=ApiResponse)
async def get_course(
    course_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    course = await service.get_course(db, course_id)
    return success(course=course)


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_course(
    payload: CourseCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    course = await service.create_course(db, payload)
    return success("Course created successfully", course=course)


@router.put(
    "/{course_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def update_course(
    course_id: int,
    payload: CourseUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    course = await service.update_course(db, course_id, payload)
    return success("Course updated successfully", course=course)


@router.delete(
    "/{course_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_course(
    course_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    await service.delete_course(db, course_id)
    return success("Course deleted successfully")
