from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.core.schemas import PersonSummary


class LeaveStatementCreate(BaseModel):
    leave_request_id: int = Field(..., gt=0)
    statement_text: str = Field(..., max_length=2000)

    @field_validator("statement_text")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Statement text cannot be empty")
        return v


class LeaveStatementResponse(BaseModel):
    id: int
    leave_request_id: int
    author_id: str
    statement_text: str
    created_at: datetime
    author: Optional[PersonSummary] = None

    class Config:
        from_attributes = True
