"""Pydantic schemas for authentication and the user profile."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from wlp.models.user import Role


class SignupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)  # bcrypt input limit
    role: Optional[Role] = None
    admin_code: Optional[str] = Field(default=None, alias="adminCode")

    model_config = {"populate_by_name": True}


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)


class UserOut(BaseModel):
    user_id: str
    email: str
    name: str
    role: Role
    employer_id: Optional[str] = None
    hotel_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
