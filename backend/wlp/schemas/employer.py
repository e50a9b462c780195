"""Pydantic schemas for the employer (tenant) account."""
from typing import Optional
from pydantic import BaseModel, Field


class EmployerUpsert(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    notes: Optional[str] = Field(default=None, max_length=1000)


class EmployerOut(BaseModel):
    employer_id: str
    name: str
    notes: Optional[str] = None

    model_config = {"from_attributes": True}
