from enum import Enum


class UserRole(str, Enum):
    COORDINATOR = "coordinator"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class RequestStatus(str, Enum):
    """Shared lifecycle of leave requests and suggestions. Only PENDING is non-terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class InterfaceMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class InterfaceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DEPRECATED = "deprecated"
