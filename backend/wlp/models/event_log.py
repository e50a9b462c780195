"""EventLogEntry ORM model — append-only audit trail of lifecycle transitions."""
import uuid
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from wlp.database import Base


class EventLogEntry(Base):
    __tablename__ = "event_log"

    entry_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    obj_type = Column(String(50), nullable=False)
    obj_id = Column(String(36), nullable=True, index=True)
    action = Column(String(50), nullable=False)
    actor_id = Column(String(36), nullable=False)
    actor_role = Column(String(20), nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    ts = Column(DateTime(timezone=True), server_default=func.now())
