"""
Checking-day boundaries.

A checking day runs from 06:00 to 06:00 the next day in a fixed UTC+7
offset, so a guard's overnight round belongs to the day it started on.
Every caller that needs "today" for attendance goes through this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

LOCAL_TZ = timezone(timedelta(hours=7), name="UTC+07:00")
DAY_START = time(6, 0)
DAY_LENGTH = timedelta(hours=24)

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True)
class CheckingDay:
    label: date
    window_start_utc: datetime
    window_end_utc: datetime

    def contains(self, instant: datetime) -> bool:
        ts = as_utc(instant)
        return self.window_start_utc <= ts < self.window_end_utc


def as_utc(value: datetime) -> datetime:
    """Normalize a stored timestamp to aware UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def checking_day_for_label(label: date) -> CheckingDay:
    if not isinstance(label, date) or isinstance(label, datetime):
        raise ValueError("label must be a calendar date")
    start_local = datetime.combine(label, DAY_START, tzinfo=LOCAL_TZ)
    start_utc = start_local.astimezone(timezone.utc)
    return CheckingDay(label=label, window_start_utc=start_utc, window_end_utc=start_utc + DAY_LENGTH)


def resolve_checking_day(now: datetime) -> CheckingDay:
    if not isinstance(now, datetime):
        raise ValueError("now must be a datetime instant")
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("now must be timezone-aware")
    local = now.astimezone(LOCAL_TZ)
    label = local.date()
    if local.time() < DAY_START:
        label -= timedelta(days=1)
    return checking_day_for_label(label)


def format_local(instant: datetime) -> str:
    """Render an instant as local display time, e.g. ``09 March 2024 10:00``."""
    local = as_utc(instant).astimezone(LOCAL_TZ)
    return f"{local.day:02d} {_MONTHS[local.month - 1]} {local.year} {local:%H:%M}"
