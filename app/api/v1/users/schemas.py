from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.auth.schemas import CourseBrief, normalize_staff_id
from app.core.enums import UserRole, UserStatus


class UserCreate(BaseModel):
    """Admin-created account; unlike self-registration the role is explicit."""

    staff_id: str
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.COORDINATOR
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("staff_id")
    @classmethod
    def check_staff_id(cls, v: str) -> str:
        return normalize_staff_id(v)


class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    # admin only
    status: Optional[UserStatus] = None
    role: Optional[UserRole] = None


class RoleUpdate(BaseModel):
    role: UserRole


class CoordinatorProfile(BaseModel):
    """Public directory entry: no status, no timestamps."""

    staff_id: str
    first_name: str
    last_name: str
    name: str
    email: str
    phone: Optional[str] = None
    courses: List[CourseBrief] = Field(default_factory=list)
