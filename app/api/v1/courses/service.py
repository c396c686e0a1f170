import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.auth.services import find_user_by_staff_id
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.models import Course
from app.core.pagination import Page, paginate
from app.core.schemas import PersonSummary

from .schemas import CourseCreate, CourseResponse, CourseUpdate

logger = logging.getLogger(__name__)


def _to_response(c: Course) -> CourseResponse:
    return CourseResponse(
        id=c.id,
        course_code=c.course_code,
        course_name=c.course_name,
        major=c.major,
        coordinator_id=c.coordinator_id,
        created_at=c.created_at,
        updated_at=c.updated_at,
        coordinator=PersonSummary.from_user(c.coordinator),
    )


def _select():
    return select(Course).options(selectinload(Course.coordinator))


async def _load(db: AsyncSession, course_id: int) -> Optional[Course]:
    result = await db.execute(
        _select().where(Course.id == course_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _ensure_code_free(db: AsyncSession, code: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(Course.id).where(Course.course_code == code)
    if exclude_id is not None:
        stmt = stmt.where(Course.id != exclude_id)
    if (await db.execute(stmt.limit(1))).scalar_one_or_none() is not None:
        raise ConflictError(f"Course with code {code} already exists")


async def _ensure_coordinator_exists(db: AsyncSession, staff_id: Optional[str]) -> None:
    if staff_id and not await find_user_by_staff_id(db, staff_id):
        raise ValidationError.for_field("coordinator_id", f"No staff member with ID {staff_id}")


async def list_courses(db: AsyncSession) -> List[CourseResponse]:
    result = await db.execute(_select().order_by(Course.course_code))
    return [_to_response(c) for c in result.scalars().all()]


async def search_courses(db: AsyncSession, query: str, page: int = 1, limit: int = 10) -> Page:
    """Case-insensitive substring match on code, name or major, ordered by code."""
    term = (query or "").strip()
    if not term:
        raise ValidationError("Search query is required")
    pattern = f"%{term}%"
    stmt = (
        _select()
        .where(
            or_(
                Course.course_code.ilike(pattern),
                Course.course_name.ilike(pattern),
                Course.major.ilike(pattern),
            )
        )
        .order_by(Course.course_code)
    )
    result = await paginate(db, stmt, page=page, limit=limit)
    result.items = [_to_response(c) for c in result.items]
    return result


async def get_course(db: AsyncSession, course_id: int) -> CourseResponse:
    course = await _load(db, course_id)
    if not course:
        raise NotFoundError("Course", course_id)
    return _to_response(course)


async def get_courses_by_coordinator(db: AsyncSession, staff_id: str) -> List[CourseResponse]:
    if not await find_user_by_staff_id(db, staff_id):
        raise NotFoundError("Coordinator", staff_id)
    result = await db.execute(
        _select().where(Course.coordinator_id == staff_id).order_by(Course.course_code)
    )
    return [_to_response(c) for c in result.scalars().all()]


async def create_course(db: AsyncSession, payload: CourseCreate) -> CourseResponse:
    code = payload.course_code.strip().upper()
    await _ensure_code_free(db, code)
    await _ensure_coordinator_exists(db, payload.coordinator_id)
    course = Course(
        course_code=code,
        course_name=payload.course_name.strip(),
        major=payload.major.strip() if payload.major else None,
        coordinator_id=payload.coordinator_id,
    )
    db.add(course)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"Course with code {code} already exists")
    logger.info("Course %s created", code)
    return _to_response(await _load(db, course.id))


async def update_course(db: AsyncSession, course_id: int, payload: CourseUpdate) -> CourseResponse:
    course = await _load(db, course_id)
    if not course:
        raise NotFoundError("Course", course_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("course_code"):
        code = data["course_code"].strip().upper()
        await _ensure_code_free(db, code, exclude_id=course_id)
        course.course_code = code
    if data.get("course_name"):
        course.course_name = data["course_name"].strip()
    if "major" in data:
        course.major = data["major"].strip() if data["major"] else None
    if "coordinator_id" in data:
        await _ensure_coordinator_exists(db, data["coordinator_id"])
        course.coordinator_id = data["coordinator_id"]
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Course code already exists")
    logger.info("Course %s updated", course_id)
    return _to_response(await _load(db, course_id))


async def delete_course(db: AsyncSession, course_id: int) -> None:
    course = await _load(db, course_id)
    if not course:
        raise NotFoundError("Course", course_id)
    await db.delete(course)
    await db.commit()
    logger.info("Course %s deleted", course_id)
