"""Append-only notes attached to a leave request. Rows are never updated or deleted."""

from datetime import datetime

from sqlalchemy import CHAR, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from app.db.session import Base


class LeaveStatement(Base):
    __tablename__ = "leave_statements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    leave_request_id = Column(
        Integer,
        ForeignKey("leave_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id = Column(CHAR(8), nullable=False)
    statement_text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    leave_request = relationship("LeaveRequest", back_populates="statements")
    author = relationship(
        "User",
        primaryjoin="foreign(LeaveStatement.author_id) == User.staff_id",
        viewonly=True,
    )
