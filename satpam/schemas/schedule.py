"""
Pydantic schemas for schedules and roster imports.
"""

from __future__ import annotations

import datetime as dt
from typing import List

from pydantic import BaseModel, Field


class ScheduleCreate(BaseModel):
    """One person on one date; expands to every location matching ``building``."""
    date: dt.date
    person_id: str = Field(..., max_length=36)
    building: str | None = Field(None, description="All Buildings, West Building or East Building")


class ScheduleBulkCreate(BaseModel):
    entries: List[ScheduleCreate] = Field(..., min_length=1)


class ScheduleResponse(BaseModel):
    id: str
    schedule_date: dt.date
    person_id: str
    person_name: str | None
    location_id: str
    location_name: str | None
    building: str | None


class SkippedScheduleOut(BaseModel):
    date: dt.date
    person_id: str
    building: str
    reason: str


class ScheduleImportSummary(BaseModel):
    inserted: int
    entries_applied: int
    skipped: List[SkippedScheduleOut]
    warnings: List[str] = Field(default_factory=list)
