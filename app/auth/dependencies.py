import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.auth.schemas import CurrentUser
from app.auth.security import decode_access_token
from app.core.exceptions import AuthenticationError
from app.db.session import get_db

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches get_current_user and is reported in the API envelope
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login-oauth", auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Resolve the authenticated user from the bearer token."""
    if not token:
        raise AuthenticationError()

    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        raise AuthenticationError("Your token has expired. Please log in again.")
    except JWTError:
        raise AuthenticationError("Invalid token. Please log in again.")

    user_id_str = payload.get("sub")
    try:
        user_id = int(user_id_str)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token. Please log in again.")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise AuthenticationError("The user belonging to this token no longer exists.")
    if not user.is_active:
        logger.info("Rejected token for inactive user %s", user.staff_id)
        raise AuthenticationError("This user account is inactive.")

    return CurrentUser(
        id=user.id,
        staff_id=user.staff_id,
        email=user.email,
        role=user.role,
    )
