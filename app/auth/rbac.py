from fastapi import Depends

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.enums import UserRole
from app.core.exceptions import AuthorizationError


def require_roles(*roles: UserRole):
    """
    Dependency factory to enforce that the caller holds one of the given roles.

    Example:
        Depends(require_roles(UserRole.ADMIN, UserRole.COORDINATOR))
    """
    allowed = {UserRole(r) for r in roles}

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed:
            if allowed == {UserRole.ADMIN}:
                raise AuthorizationError("Access denied. Admin privileges required.")
            raise AuthorizationError("You do not have permission to perform this action.")
        return current_user

    return _checker


require_admin = require_roles(UserRole.ADMIN)
require_staff = require_roles(UserRole.ADMIN, UserRole.COORDINATOR)


def ensure_self_or_admin(
    current_user: CurrentUser,
    staff_id: str,
    message: str = "Access denied. You can only access your own data unless you are an admin.",
) -> None:
    """Ownership check for personal records; run before reading or mutating anything."""
    if current_user.staff_id != staff_id and not current_user.is_admin:
        raise AuthorizationError(message)
