"""ExtensionRequest ORM model — a week-bounded extension of a RoomRequest."""
import uuid
import enum
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from wlp.database import Base


class ExtensionStatus(str, enum.Enum):
    SUBMITTED = "SUBMITTED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class ExtensionRequest(Base):
    __tablename__ = "extension_requests"

    extension_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    request_id = Column(String(36), ForeignKey("room_requests.request_id"), nullable=False, index=True)
    week_start = Column(Date, nullable=False)
    week_end = Column(Date, nullable=False)
    scope = Column(String(500), nullable=True)
    status = Column(SAEnum(ExtensionStatus, native_enum=False, length=20), nullable=False, default=ExtensionStatus.SUBMITTED)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    decided_at = Column(DateTime(timezone=True), nullable=True)

    room_request = relationship("RoomRequest", back_populates="extensions")
