"""Worker ORM model — an employer's roster entry."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from wlp.database import Base


class WorkerStatus(str, enum.Enum):
    """Derived from the worker's latest reservation, never stored."""
    UNASSIGNED = "Unassigned"
    IN_HOUSE = "In-house"
    UPCOMING = "Upcoming"
    CHECKED_OUT = "Checked-out"


class Worker(Base):
    __tablename__ = "workers"
    # Bulk import upserts on this pair; rows without a phone never collide
    __table_args__ = (UniqueConstraint("employer_id", "phone", name="uq_workers_employer_phone"),)

    worker_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employer_id = Column(String(36), ForeignKey("employers.employer_id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(40), nullable=True)
    notes = Column(String(1000), nullable=True)
    gov_id_type = Column(String(30), nullable=True)
    gov_id_last4 = Column(String(4), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
