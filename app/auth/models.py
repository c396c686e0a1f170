from datetime import datetime

from sqlalchemy import CHAR, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.enums import UserRole, UserStatus
from app.db.session import Base


class User(Base):
    """Staff member. staff_id is the business identifier other tables reference."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(CHAR(8), nullable=False, unique=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=False, unique=True)
    phone = Column(String(30), nullable=True)
    password_hash = Column(Text, nullable=False)
    # coordinator | admin
    role = Column(String(20), nullable=False, default=UserRole.COORDINATOR.value)
    # active | inactive; users are deactivated, never deleted
    status = Column(String(20), nullable=False, default=UserStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    courses = relationship(
        "Course",
        primaryjoin="User.staff_id == foreign(Course.coordinator_id)",
        order_by="Course.course_code",
        viewonly=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value
