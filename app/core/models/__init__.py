from app.core.models.connect_interface import ConnectInterface
from app.core.models.course import Course
from app.core.models.leave_request import LeaveRequest
from app.core.models.leave_statement import LeaveStatement
from app.core.models.suggestion import Suggestion

__all__ = [
    "ConnectInterface",
    "Course",
    "LeaveRequest",
    "LeaveStatement",
    "Suggestion",
]
