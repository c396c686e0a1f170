from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.core.enums import RequestStatus
from app.core.schemas import PersonSummary


class SuggestionCreate(BaseModel):
    suggestion_text: str = Field(..., max_length=1000)

    @field_validator("suggestion_text")
    @classmethod
    def not_blank(cls, v: str) -> str:
        # Validated but never rewritten: the text is stored exactly as sent
        if not v.strip():
            raise ValueError("Suggestion text cannot be empty")
        return v


class SuggestionResponse(BaseModel):
    id: int
    coordinator_id: str
    suggestion_text: str
    status: RequestStatus
    admin_comments: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    submitted_at: datetime
    coordinator: Optional[PersonSummary] = None

    class Config:
        from_attributes = True
