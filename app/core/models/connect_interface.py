"""Catalogue of external system endpoints staff can look up. Deleting marks a row inactive."""

from datetime import datetime

from sqlalchemy import CHAR, JSON, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.enums import InterfaceStatus
from app.db.session import Base


class ConnectInterface(Base):
    __tablename__ = "connect_interfaces"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    endpoint = Column(String(255), nullable=False)
    # GET | POST | PUT | DELETE
    method = Column(String(10), nullable=False)
    parameters = Column(JSON, nullable=True)
    response_schema = Column(JSON, nullable=True)
    status = Column(String(20), nullable=False, default=InterfaceStatus.ACTIVE.value, index=True)
    created_by = Column(CHAR(8), nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    creator = relationship(
        "User",
        primaryjoin="foreign(ConnectInterface.created_by) == User.staff_id",
        viewonly=True,
    )
