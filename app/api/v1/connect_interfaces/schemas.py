from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.enums import InterfaceMethod, InterfaceStatus
from app.core.schemas import PersonSummary


def _not_blank(v: Optional[str], label: str) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError(f"{label} cannot be empty")
    return v.strip() if v is not None else v


class ConnectInterfaceCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str
    endpoint: str = Field(..., max_length=255)
    method: InterfaceMethod
    parameters: Optional[Dict[str, Any]] = None
    response_schema: Optional[Dict[str, Any]] = None
    status: InterfaceStatus = InterfaceStatus.ACTIVE

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return _not_blank(v, "Interface name")

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str) -> str:
        return _not_blank(v, "Interface description")

    @field_validator("endpoint")
    @classmethod
    def check_endpoint(cls, v: str) -> str:
        return _not_blank(v, "Interface URL")


class ConnectInterfaceUpdate(BaseModel):
    """Partial update; omitted fields are left as they are."""

    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    endpoint: Optional[str] = Field(None, max_length=255)
    method: Optional[InterfaceMethod] = None
    parameters: Optional[Dict[str, Any]] = None
    response_schema: Optional[Dict[str, Any]] = None
    status: Optional[InterfaceStatus] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v, "Interface name")

    @field_validator("description")
    @classmethod
    def check_description(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v, "Interface description")

    @field_validator("endpoint")
    @classmethod
    def check_endpoint(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v, "Interface URL")


class ConnectInterfaceResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    endpoint: str
    method: InterfaceMethod
    parameters: Optional[Dict[str, Any]] = None
    response_schema: Optional[Dict[str, Any]] = None
    status: InterfaceStatus
    created_by: str
    created_at: datetime
    updated_at: datetime
    creator: Optional[PersonSummary] = None

    class Config:
        from_attributes = True
