from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.enums import UserRole, UserStatus

STAFF_ID_LENGTH = 8


def normalize_staff_id(value: str) -> str:
    value = (value or "").strip()
    if len(value) != STAFF_ID_LENGTH:
        raise ValueError(f"Staff ID must be {STAFF_ID_LENGTH} characters")
    return value


class RegisterRequest(BaseModel):
    """Public self-registration. Always creates a coordinator; admins are created by admins."""

    staff_id: str
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("staff_id")
    @classmethod
    def check_staff_id(cls, v: str) -> str:
        return normalize_staff_id(v)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class PasswordUpdateRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class UserInfo(BaseModel):
    id: int
    staff_id: str
    first_name: str
    last_name: str
    name: str
    email: EmailStr
    phone: Optional[str] = None
    role: UserRole
    status: UserStatus
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "UserInfo":
        return cls(
            id=user.id,
            staff_id=user.staff_id,
            first_name=user.first_name,
            last_name=user.last_name,
            name=user.full_name,
            email=user.email,
            phone=user.phone,
            role=user.role,
            status=user.status,
            created_at=user.created_at,
        )


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserInfo


class CourseBrief(BaseModel):
    id: int
    course_code: str
    course_name: str
    major: Optional[str] = None


class ProfileResponse(BaseModel):
    user: UserInfo
    courses: List[CourseBrief] = Field(default_factory=list)


class CurrentUser(BaseModel):
    """Lightweight representation of the authenticated user for authorization checks."""

    id: int
    staff_id: str
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
