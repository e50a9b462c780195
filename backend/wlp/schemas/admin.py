"""Pydantic schemas for admin and hotel routes."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field

from wlp.models.user import Role


class RoleUpdate(BaseModel):
    role: Role


class HotelCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)


class HotelOut(BaseModel):
    hotel_id: str
    name: str

    model_config = {"from_attributes": True}


class EventLogOut(BaseModel):
    entry_id: str
    obj_type: str
    obj_id: Optional[str] = None
    action: str
    actor_id: str
    actor_role: str
    payload: dict[str, Any]
    ts: Optional[datetime] = None

    model_config = {"from_attributes": True}
