"""
Pydantic schemas for check-area reports and dashboards.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List

from pydantic import BaseModel


class ReportResponse(BaseModel):
    id: str
    person_id: str
    person_name: str | None = None
    location_id: str
    location_name: str | None = None
    photo_url: str
    created_at: datetime
    created_at_local: str


class LocationStatusOut(BaseModel):
    location_id: str
    location_name: str
    building: str | None
    is_checked: bool
    last_checked_at: str | None = None
    last_checked_at_utc: datetime | None = None
    evidence_url: str | None = None
    reported_by: str | None = None
    reported_by_name: str | None = None


class DashboardResponse(BaseModel):
    checking_day: date
    window_start_utc: datetime
    window_end_utc: datetime
    total: int
    checked: int
    locations: List[LocationStatusOut]
