"""RoomRequest ORM model and its status machine states."""
import uuid
import enum
from sqlalchemy import CheckConstraint, Column, String, Date, DateTime, Integer, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from wlp.database import Base


class RoomRequestStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    ACCEPTED = "ACCEPTED"
    ASSIGNED = "ASSIGNED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"


TERMINAL_STATUSES = frozenset({
    RoomRequestStatus.REJECTED,
    RoomRequestStatus.CANCELED,
    RoomRequestStatus.CHECKED_OUT,
})


class RoomRequest(Base):
    __tablename__ = "room_requests"
    __table_args__ = (
        CheckConstraint("stay_end > stay_start", name="ck_room_requests_stay_window"),
        CheckConstraint("headcount >= 1", name="ck_room_requests_headcount"),
    )

    request_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employer_id = Column(String(36), ForeignKey("employers.employer_id"), nullable=False, index=True)
    hotel_id = Column(String(36), ForeignKey("hotels.hotel_id"), nullable=False)
    stay_start = Column(Date, nullable=False)
    stay_end = Column(Date, nullable=False)
    headcount = Column(Integer, nullable=False)
    room_type_mix = Column(JSON, nullable=False)  # {"SINGLE": n, "DOUBLE": n}
    notes = Column(String(1000), nullable=True)
    decision_note = Column(String(1000), nullable=True)
    status = Column(SAEnum(RoomRequestStatus, native_enum=False, length=20), nullable=False, default=RoomRequestStatus.SUBMITTED)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    extensions = relationship("ExtensionRequest", back_populates="room_request", cascade="all, delete-orphan")
