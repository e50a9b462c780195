"""Pydantic schemas for the worker roster and reservations."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

MAX_IMPORT_ROWS = 1000


class WorkerIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=40)
    notes: Optional[str] = Field(default=None, max_length=1000)
    gov_id_type: Optional[str] = Field(default=None, max_length=30)
    gov_id_last4: Optional[str] = Field(default=None, max_length=4)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("phone", "notes", "gov_id_type", "gov_id_last4")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        # CSV cells arrive as empty strings
        if v is None:
            return None
        return v.strip() or None


class WorkerBulkImport(BaseModel):
    workers: list[WorkerIn] = Field(min_length=1, max_length=MAX_IMPORT_ROWS)


class ReservationCreate(BaseModel):
    request_id: str = Field(min_length=1, max_length=36)
    worker_id: Optional[str] = Field(default=None, max_length=36)
    worker_name: Optional[str] = Field(default=None, max_length=200)
    room_no: Optional[str] = Field(default=None, max_length=20)
    checkin_ts: Optional[datetime] = None

    @model_validator(mode="after")
    def _needs_worker(self) -> "ReservationCreate":
        if not self.worker_id and not (self.worker_name and self.worker_name.strip()):
            raise ValueError("worker_id or worker_name is required")
        return self


class ReservationOut(BaseModel):
    reservation_id: str
    employer_id: str
    hotel_id: str
    request_id: Optional[str] = None
    worker_id: Optional[str] = None
    worker_name: str
    room_no: Optional[str] = None
    checkin_ts: Optional[datetime] = None
    checkout_ts: Optional[datetime] = None

    model_config = {"from_attributes": True}
