"""
Pydantic schemas for personnel accounts.
"""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field


class PersonResponse(BaseModel):
    id: str
    username: str
    first_name: str
    last_name: str
    full_name: str
    id_number: str | None
    role: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """Fields a person may change on their own profile."""
    first_name: str | None = Field(None, max_length=128)
    last_name: str | None = Field(None, max_length=128)
    id_number: str | None = Field(None, max_length=64)


class PersonUpdate(ProfileUpdate):
    """Admin edit; role and activation included."""
    role: str | None = Field(None, max_length=32)
    is_active: bool | None = None
    password: str | None = Field(None, min_length=6, max_length=256)
