"""
Seed script to create the first admin user.

Run once (after init_db) with env set:
  ADMIN_STAFF_ID=00000001
  ADMIN_EMAIL=admin@curtin.edu.au
  ADMIN_PASSWORD=YourSecurePassword

An existing user with that email is promoted to admin and its password reset.
"""
import asyncio

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

import app.core.models  # noqa: F401
from app.auth.models import User
from app.auth.schemas import normalize_staff_id
from app.auth.security import hash_password
from app.core.config import settings
from app.core.enums import UserRole, UserStatus
from app.db.session import AsyncSessionLocal

DEFAULT_ADMIN_STAFF_ID = "00000001"
DEFAULT_ADMIN_FIRST_NAME = "System"
DEFAULT_ADMIN_LAST_NAME = "Admin"


async def seed_admin(db: AsyncSession) -> None:
    email = settings.admin_email
    password = settings.admin_password
    if not email or not password:
        print("ADMIN_EMAIL / ADMIN_PASSWORD not set; skipping admin user.")
        return
    staff_id = normalize_staff_id(settings.admin_staff_id or DEFAULT_ADMIN_STAFF_ID)

    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    admin = result.scalar_one_or_none()
    if not admin:
        admin = User(
            staff_id=staff_id,
            first_name=DEFAULT_ADMIN_FIRST_NAME,
            last_name=DEFAULT_ADMIN_LAST_NAME,
            email=email,
            password_hash=hash_password(password),
            role=UserRole.ADMIN.value,
            status=UserStatus.ACTIVE.value,
        )
        db.add(admin)
        print("Created admin user:", email)
    else:
        admin.role = UserRole.ADMIN.value
        admin.status = UserStatus.ACTIVE.value
        admin.password_hash = hash_password(password)
        print("Updated existing user to admin:", email)

    await db.commit()
    print("Admin seed done.")


async def main() -> None:
    async with AsyncSessionLocal() as db:
        try:
            await seed_admin(db)
        except Exception as e:
            await db.rollback()
            print("Error:", e)
            raise


if __name__ == "__main__":
    asyncio.run(main())
