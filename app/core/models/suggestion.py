from datetime import datetime

from sqlalchemy import CHAR, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.enums import RequestStatus
from app.db.session import Base


class Suggestion(Base):
    __tablename__ = "suggestions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    coordinator_id = Column(CHAR(8), nullable=False, index=True)
    # Stored exactly as submitted
    suggestion_text = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=RequestStatus.PENDING.value)
    admin_comments = Column(String(500), nullable=True)
    reviewed_by = Column(CHAR(8), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    submitted_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    coordinator = relationship(
        "User",
        primaryjoin="foreign(Suggestion.coordinator_id) == User.staff_id",
        viewonly=True,
    )
