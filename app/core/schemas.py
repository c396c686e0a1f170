from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Envelope returned by every endpoint: {status, message?, data?}."""

    status: str = "success"
    message: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class ApiListResponse(ApiResponse):
    """List envelope; results is the number of items in data."""

    results: int = 0


class PaginatedResponse(ApiListResponse):
    total: int = 0
    total_pages: int = 0
    current_page: int = 1


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str
    errors: Optional[List[Dict[str, str]]] = None


class PersonSummary(BaseModel):
    """Identity of a party (coordinator, deputy, author) shown next to records."""

    staff_id: str
    name: str
    email: str

    @classmethod
    def from_user(cls, user) -> Optional["PersonSummary"]:
        if user is None:
            return None
        return cls(staff_id=user.staff_id, name=user.full_name, email=user.email)


def success(message: Optional[str] = None, **data: Any) -> ApiResponse:
    return ApiResponse(message=message, data=data or None)


def success_list(key: str, items: list, message: Optional[str] = None) -> ApiListResponse:
    return ApiListResponse(message=message, results=len(items), data={key: items})
