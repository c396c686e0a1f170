"""Coordinator leave requests: pending until an admin approves or rejects them once."""

from datetime import datetime

from sqlalchemy import Boolean, CHAR, Column, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.enums import RequestStatus
from app.db.session import Base


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    coordinator_id = Column(CHAR(8), nullable=False, index=True)
    deputy_id = Column(CHAR(8), nullable=True, index=True)
    course_code = Column(String(20), nullable=True)
    duties = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_short_leave = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default=RequestStatus.PENDING.value, index=True)
    admin_comments = Column(String(500), nullable=True)
    # staff_id of the admin who approved or rejected
    reviewed_by = Column(CHAR(8), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    coordinator = relationship(
        "User",
        primaryjoin="foreign(LeaveRequest.coordinator_id) == User.staff_id",
        viewonly=True,
    )
    deputy = relationship(
        "User",
        primaryjoin="foreign(LeaveRequest.deputy_id) == User.staff_id",
        viewonly=True,
    )
    statements = relationship(
        "LeaveStatement",
        back_populates="leave_request",
        order_by="LeaveStatement.created_at.desc()",
    )
