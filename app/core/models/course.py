from datetime import datetime

from sqlalchemy import CHAR, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.db.session import Base


class Course(Base):
    """Course metadata. coordinator_id is a staff_id and may dangle; no cascade on user removal."""

    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_code = Column(String(20), nullable=False, unique=True, index=True)
    course_name = Column(String(100), nullable=False)
    major = Column(String(100), nullable=True)
    coordinator_id = Column(CHAR(8), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    coordinator = relationship(
        "User",
        primaryjoin="foreign(Course.coordinator_id) == User.staff_id",
        viewonly=True,
    )
