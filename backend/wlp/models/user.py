"""User ORM model — the credential store record."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from wlp.database import Base


class Role(str, enum.Enum):
    EMPLOYER = "EMPLOYER"
    FRONTDESK = "FRONTDESK"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "app_users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(320), nullable=False, unique=True)  # stored lower-cased
    name = Column(String(200), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(SAEnum(Role, native_enum=False, length=20), nullable=False, default=Role.EMPLOYER)
    employer_id = Column(String(36), ForeignKey("employers.employer_id"), nullable=True)
    hotel_id = Column(String(36), ForeignKey("hotels.hotel_id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
