"""
Pydantic schemas for check locations.
"""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field


class LocationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    building: str | None = Field(None, max_length=32, description="West Building / East Building")


class LocationUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    building: str | None = Field(None, max_length=32)


class LocationResponse(BaseModel):
    id: str
    name: str
    building: str | None
    qr_code_data: str
    created_at: datetime

    class Config:
        from_attributes = True
