import logging
from typing import Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.auth.models import User
from app.auth.schemas import (
    CourseBrief,
    LoginRequest,
    LoginResponse,
    PasswordUpdateRequest,
    ProfileResponse,
    RegisterRequest,
    UserInfo,
)
from app.auth.security import hash_password, token_for_user, verify_password
from app.core.enums import UserRole, UserStatus
from app.core.exceptions import AuthenticationError, ConflictError, NotFoundError
from app.core.notifications import Notifier, notify_safely

logger = logging.getLogger(__name__)


async def find_user_by_staff_id(db: AsyncSession, staff_id: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.staff_id == staff_id))
    return result.scalar_one_or_none()


async def ensure_unique_identity(
    db: AsyncSession, email: str, staff_id: Optional[str] = None, exclude_id: Optional[int] = None
) -> None:
    conditions = [func.lower(User.email) == func.lower(email)]
    if staff_id:
        conditions.append(User.staff_id == staff_id)
    stmt = select(User).where(or_(*conditions))
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    existing = (await db.execute(stmt)).scalars().first()
    if existing:
        if existing.email.lower() == email.lower():
            raise ConflictError("User with this email already exists")
        raise ConflictError("User with this staff ID already exists")


async def create_user(
    db: AsyncSession,
    *,
    staff_id: str,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    role: UserRole,
    phone: Optional[str] = None,
) -> User:
    await ensure_unique_identity(db, email, staff_id)
    user = User(
        staff_id=staff_id,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=email,
        phone=phone or None,
        password_hash=hash_password(password),
        role=role.value,
        status=UserStatus.ACTIVE.value,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("User with this email or staff ID already exists") from e
    await db.refresh(user)
    return user


async def register_user(
    db: AsyncSession, notifier: Notifier, payload: RegisterRequest
) -> Tuple[str, UserInfo]:
    user = await create_user(
        db,
        staff_id=payload.staff_id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        password=payload.password,
        role=UserRole.COORDINATOR,
        phone=payload.phone,
    )
    logger.info("Registered coordinator %s", user.staff_id)

    body = (
        f"Dear {user.full_name},\n\n"
        "Welcome to the EECMS Coordinator Coordination System!\n\n"
        "Your account has been successfully created with the following details:\n"
        f"- Staff ID: {user.staff_id}\n"
        f"- Email: {user.email}\n"
        "- Role: Coordinator\n\n"
        "You can now log in to the system using your email and password.\n\n"
        "Best regards,\nEECMS Team"
    )
    await notify_safely(notifier, user.email, "Welcome to EECMS Coordinator Coordination System", body)
    return token_for_user(user), UserInfo.from_user(user)


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    # 1. Find user by email (case-insensitive)
    user_stmt = select(User).where(func.lower(User.email) == func.lower(payload.email))
    user_result = await db.execute(user_stmt)
    user: Optional[User] = user_result.scalar_one_or_none()
    if not user:
        logger.warning("Login failed: user not found (%s)", payload.email)
        raise AuthenticationError("Invalid credentials")

    # 2. Verify password hash
    if not verify_password(payload.password, user.password_hash):
        logger.warning("Login failed: invalid password (%s)", payload.email)
        raise AuthenticationError("Invalid credentials")

    # 3. Check user status
    if not user.is_active:
        logger.warning("Login failed: inactive account (%s)", payload.email)
        raise AuthenticationError("Account is inactive")

    logger.info("Login successful for %s (%s)", user.staff_id, user.role)
    return LoginResponse(access_token=token_for_user(user), user=UserInfo.from_user(user))


async def get_profile(db: AsyncSession, user_id: int) -> ProfileResponse:
    result = await db.execute(
        select(User).options(selectinload(User.courses)).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User")
    return ProfileResponse(
        user=UserInfo.from_user(user),
        courses=[
            CourseBrief(id=c.id, course_code=c.course_code, course_name=c.course_name, major=c.major)
            for c in user.courses
        ],
    )


async def update_password(db: AsyncSession, user_id: int, payload: PasswordUpdateRequest) -> None:
    user = await db.get(User, user_id)
    if not user:
        raise NotFoundError("User")
    if not verify_password(payload.current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    user.password_hash = hash_password(payload.new_password)
    await db.commit()
    logger.info("Password updated for %s", user.staff_id)
