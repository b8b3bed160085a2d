"""
Per-location check status for a checking day.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional, Protocol

from .checking_day import as_utc, format_local


class ReportLike(Protocol):
    location_id: str
    person_id: str
    photo_url: str
    created_at: datetime


@dataclass(frozen=True)
class LocationStatus:
    location: Any
    is_checked: bool
    last_checked_at: Optional[str] = None
    last_checked_at_utc: Optional[datetime] = None
    evidence_ref: Optional[str] = None
    reported_by: Optional[str] = None


def _latest_by_location(reports: Iterable[ReportLike], person_id: Optional[str]) -> dict[str, ReportLike]:
    latest: dict[str, ReportLike] = {}
    for report in reports:
        if person_id is not None and report.person_id != person_id:
            continue
        current = latest.get(report.location_id)
        # ">=" keeps the later input on an exact tie
        if current is None or as_utc(report.created_at) >= as_utc(current.created_at):
            latest[report.location_id] = report
    return latest


def reconcile(
    locations_assigned_today: Iterable[Any],
    reports_in_window: Iterable[ReportLike],
    person_id: Optional[str] = None,
) -> list[LocationStatus]:
    """Fold reports onto locations: one status per location, newest report wins.

    ``person_id`` narrows matching to one guard (self view); ``None``
    accepts any reporter (audit view). Locations are anything with an
    ``id`` attribute and are passed through unchanged.
    """
    latest = _latest_by_location(reports_in_window, person_id)
    statuses: list[LocationStatus] = []
    for location in locations_assigned_today:
        report = latest.get(location.id)
        if report is None:
            statuses.append(LocationStatus(location=location, is_checked=False))
            continue
        submitted = as_utc(report.created_at)
        statuses.append(
            LocationStatus(
                location=location,
                is_checked=True,
                last_checked_at=format_local(submitted),
                last_checked_at_utc=submitted,
                evidence_ref=report.photo_url,
                reported_by=report.person_id,
            )
        )
    return statuses
