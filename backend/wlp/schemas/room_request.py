"""Pydantic schemas for room requests and their extensions."""
from __future__ import annotations
from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator

from wlp.models.extension_request import ExtensionStatus
from wlp.models.room_request import RoomRequestStatus

MAX_EXTENSION_DAYS = 7


class RoomTypeMix(BaseModel):
    SINGLE: int = Field(default=0, ge=0)
    DOUBLE: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.SINGLE + self.DOUBLE


class RoomRequestCreate(BaseModel):
    hotel_id: str = Field(min_length=1, max_length=36)
    stay_start: date
    stay_end: date
    headcount: int = Field(ge=1)
    room_type_mix: RoomTypeMix
    notes: Optional[str] = Field(default=None, max_length=1000)
    draft: bool = False  # save as DRAFT instead of submitting right away

    @model_validator(mode="after")
    def _check_stay(self) -> "RoomRequestCreate":
        if self.stay_end <= self.stay_start:
            raise ValueError("stay_end must be after stay_start")
        if self.room_type_mix.total <= 0:
            raise ValueError("room_type_mix must request at least one room")
        return self


class RoomRequestOut(BaseModel):
    request_id: str
    employer_id: str
    hotel_id: str
    stay_start: date
    stay_end: date
    headcount: int
    room_type_mix: dict[str, int]
    notes: Optional[str] = None
    decision_note: Optional[str] = None
    status: RoomRequestStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DecisionRequest(BaseModel):
    decision: Literal["ACCEPT", "REJECT"]
    note: Optional[str] = Field(default=None, max_length=1000)


class TransitionNote(BaseModel):
    note: Optional[str] = Field(default=None, max_length=1000)


class ExtensionCreate(BaseModel):
    week_start: date
    week_end: date
    scope: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _check_window(self) -> "ExtensionCreate":
        days = (self.week_end - self.week_start).days
        if days <= 0 or days > MAX_EXTENSION_DAYS:
            raise ValueError(f"week_end must be 1 to {MAX_EXTENSION_DAYS} days after week_start")
        return self


class ExtensionOut(BaseModel):
    extension_id: str
    request_id: str
    week_start: date
    week_end: date
    scope: Optional[str] = None
    status: ExtensionStatus
    created_at: Optional[datetime] = None
    decided_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
