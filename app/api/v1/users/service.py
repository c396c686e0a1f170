"""User directory and administration. Accounts are deactivated, never deleted."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.auth.models import User
from app.auth.rbac import ensure_self_or_admin
from app.auth.schemas import CourseBrief, CurrentUser, UserInfo
from app.auth.services import create_user, ensure_unique_identity, find_user_by_staff_id
from app.core.enums import UserRole, UserStatus
from app.core.exceptions import AuthorizationError, ConflictError, NotFoundError
from app.core.notifications import Notifier, notify_safely
from app.core.pagination import Page, paginate

from .schemas import CoordinatorProfile, UserCreate, UserUpdate

logger = logging.getLogger(__name__)

ROLE_LABELS = {UserRole.ADMIN.value: "Administrator", UserRole.COORDINATOR.value: "Coordinator"}


def _to_coordinator_profile(user: User) -> CoordinatorProfile:
    return CoordinatorProfile(
        staff_id=user.staff_id,
        first_name=user.first_name,
        last_name=user.last_name,
        name=user.full_name,
        email=user.email,
        phone=user.phone,
        courses=[
            CourseBrief(id=c.id, course_code=c.course_code, course_name=c.course_name, major=c.major)
            for c in user.courses
        ],
    )


async def _get_user_or_404(db: AsyncSession, staff_id: str) -> User:
    user = await find_user_by_staff_id(db, staff_id)
    if not user:
        raise NotFoundError("User", staff_id)
    return user


async def _notify_status_change(notifier: Notifier, user: User) -> None:
    if user.is_active:
        detail = "Your account is now active and you can access the system."
    else:
        detail = "Your account has been deactivated. Please contact the administrator for more information."
    body = (
        f"Dear {user.full_name},\n\n"
        f"Your account status has been updated to: {user.status}\n\n"
        f"{detail}\n\n"
        "Best regards,\nEECMS Team"
    )
    await notify_safely(notifier, user.email, "Account Status Update", body)


async def _notify_role_change(notifier: Notifier, user: User) -> None:
    body = (
        f"Dear {user.full_name},\n\n"
        f"Your role in the system has been updated to: {ROLE_LABELS.get(user.role, user.role)}\n\n"
        "This change may affect your access to certain features in the system.\n\n"
        "Best regards,\nEECMS Team"
    )
    await notify_safely(notifier, user.email, "Role Update Notification", body)


# ----- Public directory -----
async def list_coordinators(db: AsyncSession) -> List[CoordinatorProfile]:
    result = await db.execute(
        select(User)
        .options(selectinload(User.courses))
        .where(User.role == UserRole.COORDINATOR.value, User.status == UserStatus.ACTIVE.value)
        .order_by(User.last_name, User.first_name)
    )
    return [_to_coordinator_profile(u) for u in result.scalars().all()]


async def get_coordinator(db: AsyncSession, staff_id: str) -> CoordinatorProfile:
    result = await db.execute(
        select(User)
        .options(selectinload(User.courses))
        .where(
            User.staff_id == staff_id,
            User.role == UserRole.COORDINATOR.value,
            User.status == UserStatus.ACTIVE.value,
        )
    )
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("Coordinator", staff_id)
    return _to_coordinator_profile(user)


# ----- Administration -----
async def list_users(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    role: Optional[UserRole] = None,
) -> Page:
    stmt = select(User)
    if role is not None:
        stmt = stmt.where(User.role == role.value)
    stmt = stmt.order_by(User.last_name, User.first_name, User.id)
    result = await paginate(db, stmt, page=page, limit=limit)
    result.items = [UserInfo.from_user(u) for u in result.items]
    return result


async def get_user(db: AsyncSession, staff_id: str, current_user: CurrentUser) -> UserInfo:
    ensure_self_or_admin(current_user, staff_id)
    return UserInfo.from_user(await _get_user_or_404(db, staff_id))


async def admin_create_user(db: AsyncSession, payload: UserCreate) -> UserInfo:
    user = await create_user(
        db,
        staff_id=payload.staff_id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        phone=payload.phone,
    )
    logger.info("User %s created with role %s", user.staff_id, user.role)
    return UserInfo.from_user(user)


async def update_user(
    db: AsyncSession,
    notifier: Notifier,
    staff_id: str,
    payload: UserUpdate,
    current_user: CurrentUser,
) -> UserInfo:
    ensure_self_or_admin(current_user, staff_id)
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if ("status" in data or "role" in data) and not current_user.is_admin:
        raise AuthorizationError("Only admins can update user roles or status")

    user = await _get_user_or_404(db, staff_id)
    old_status, old_role = user.status, user.role

    if "email" in data and data["email"].lower() != user.email.lower():
        await ensure_unique_identity(db, data["email"], exclude_id=user.id)
        user.email = data["email"]
    for field in ("first_name", "last_name"):
        if field in data:
            setattr(user, field, data[field].strip())
    if "phone" in data:
        user.phone = data["phone"] or None
    if "status" in data:
        user.status = data["status"].value
    if "role" in data:
        user.role = data["role"].value

    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("User with this email already exists") from e
    await db.refresh(user)
    logger.info("User %s updated by %s", staff_id, current_user.staff_id)

    if user.status != old_status:
        await _notify_status_change(notifier, user)
    if user.role != old_role:
        await _notify_role_change(notifier, user)
    return UserInfo.from_user(user)


async def set_role(db: AsyncSession, notifier: Notifier, staff_id: str, role: UserRole) -> UserInfo:
    user = await _get_user_or_404(db, staff_id)
    changed = user.role != role.value
    user.role = role.value
    await db.commit()
    await db.refresh(user)
    if changed:
        logger.info("User %s role set to %s", staff_id, role.value)
        await _notify_role_change(notifier, user)
    return UserInfo.from_user(user)


async def deactivate_user(db: AsyncSession, notifier: Notifier, staff_id: str, current_user: CurrentUser) -> None:
    if staff_id == current_user.staff_id:
        raise ConflictError("You cannot deactivate your own account")
    user = await _get_user_or_404(db, staff_id)
    if not user.is_active:
        return
    user.status = UserStatus.INACTIVE.value
    await db.commit()
    await db.refresh(user)
    logger.info("User %s deactivated by %s", staff_id, current_user.staff_id)
    await _notify_status_change(notifier, user)
