from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.auth.schemas import normalize_staff_id
from app.core.schemas import PersonSummary


def _not_blank(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError("Value cannot be blank")
    return v


def _clean_coordinator_id(v: Optional[str]) -> Optional[str]:
    if v is None or not v.strip():
        return None
    return normalize_staff_id(v)


class CourseCreate(BaseModel):
    course_code: str = Field(..., min_length=1, max_length=20)
    course_name: str = Field(..., min_length=1, max_length=100)
    major: Optional[str] = Field(None, max_length=100)
    coordinator_id: Optional[str] = None

    @field_validator("course_code", "course_name")
    @classmethod
    def check_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)

    @field_validator("coordinator_id")
    @classmethod
    def check_coordinator_id(cls, v: Optional[str]) -> Optional[str]:
        return _clean_coordinator_id(v)


class CourseUpdate(BaseModel):
    """Partial update; omitted fields are left as they are."""

    course_code: Optional[str] = Field(None, min_length=1, max_length=20)
    course_name: Optional[str] = Field(None, min_length=1, max_length=100)
    major: Optional[str] = Field(None, max_length=100)
    coordinator_id: Optional[str] = None

    @field_validator("course_code", "course_name")
    @classmethod
    def check_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)

    @field_validator("coordinator_id")
    @classmethod
    def check_coordinator_id(cls, v: Optional[str]) -> Optional[str]:
        return _clean_coordinator_id(v)


class CourseResponse(BaseModel):
    id: int
    course_code: str
    course_name: str
    major: Optional[str] = None
    coordinator_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    coordinator: Optional[PersonSummary] = None

    class Config:
        from_attributes = True
