"""Pydantic schemas for self-service account changes."""
from pydantic import BaseModel, Field


class ProfileUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=200)


class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1, max_length=72, alias="currentPassword")
    new_password: str = Field(min_length=6, max_length=72, alias="newPassword")

    model_config = {"populate_by_name": True}
