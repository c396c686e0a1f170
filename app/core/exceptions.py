from typing import Dict, List, Optional

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(ServiceError):
    """Malformed or missing input. errors holds field-level detail: [{"field": ..., "message": ...}]."""

    def __init__(self, message: str = "Validation error", errors: Optional[List[Dict[str, str]]] = None) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls("Validation error", [{"field": field, "message": message}])


class AuthenticationError(ServiceError):
    def __init__(self, message: str = "You are not logged in. Please log in to get access.") -> None:
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class AuthorizationError(ServiceError):
    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class NotFoundError(ServiceError):
    def __init__(self, resource: str, identifier=None) -> None:
        message = f"{resource} not found" if identifier is None else f"{resource} not found with id {identifier}"
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConflictError(ServiceError):
    def __init__(self, message: str = "Resource already exists") -> None:
        super().__init__(message, status.HTTP_409_CONFLICT)


class DependencyError(ServiceError):
    """Database or notification channel failure."""

    def __init__(self, message: str = "A required service is unavailable. Please try again later.") -> None:
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)
