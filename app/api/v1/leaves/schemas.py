from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from app.auth.schemas import normalize_staff_id
from app.core.enums import RequestStatus
from app.core.schemas import PersonSummary


# ----- Submit Leave -----
class LeaveRequestCreate(BaseModel):
    """Submit a leave request. coordinator_id is always the caller's staff ID, never taken from the body."""

    deputy_id: str = Field(..., description="Staff ID of the nominated deputy")
    course_code: Optional[str] = Field(None, max_length=20)
    duties: Optional[str] = Field(None, max_length=2000)
    start_date: date
    end_date: date
    is_short_leave: bool = False

    @field_validator("deputy_id")
    @classmethod
    def check_deputy_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Deputy ID cannot be empty")
        try:
            return normalize_staff_id(v)
        except ValueError:
            raise ValueError("Deputy ID must be 8 characters")

    @field_validator("end_date")
    @classmethod
    def check_end_after_start(cls, v: date, info: ValidationInfo) -> date:
        start = info.data.get("start_date")
        if start is not None and v <= start:
            raise ValueError("End date must be after start date")
        return v


# ----- Approve / Reject -----
class ReviewRequest(BaseModel):
    admin_comments: Optional[str] = Field(None, max_length=500)


# ----- Leave Request Response -----
class LeaveRequestResponse(BaseModel):
    id: int
    coordinator_id: str
    deputy_id: Optional[str] = None
    course_code: Optional[str] = None
    duties: Optional[str] = None
    start_date: date
    end_date: date
    is_short_leave: bool
    status: RequestStatus
    admin_comments: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    coordinator: Optional[PersonSummary] = None
    deputy: Optional[PersonSummary] = None

    class Config:
        from_attributes = True
