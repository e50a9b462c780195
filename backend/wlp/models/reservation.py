"""Reservation ORM model — one worker placed in a room at a hotel."""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from wlp.database import Base


class Reservation(Base):
    __tablename__ = "reservations"

    reservation_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employer_id = Column(String(36), ForeignKey("employers.employer_id"), nullable=False, index=True)
    hotel_id = Column(String(36), ForeignKey("hotels.hotel_id"), nullable=False)
    request_id = Column(String(36), ForeignKey("room_requests.request_id"), nullable=True)
    worker_id = Column(String(36), ForeignKey("workers.worker_id"), nullable=True, index=True)
    worker_name = Column(String(200), nullable=False)
    room_no = Column(String(20), nullable=True)
    checkin_ts = Column(DateTime(timezone=True), nullable=True)
    checkout_ts = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    hotel = relationship("Hotel")
