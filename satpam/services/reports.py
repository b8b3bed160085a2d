"""
Check-area reports and the dashboards built from them.

A report is written only after its evidence photo is stored; a failed
upload leaves no row behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ..core.errors import StorageError, log_exception
from ..models.check_area_report import CheckAreaReport
from ..models.location import Location
from ..models.person import Person
from . import locations as location_service
from . import schedules as schedule_service
from .attendance import LocationStatus, reconcile
from .checking_day import CheckingDay, as_utc, checking_day_for_label, resolve_checking_day
from .storage import StorageProvider, build_object_key, extension_for, get_storage_provider

logger = logging.getLogger("reports")


@dataclass
class Dashboard:
    day: CheckingDay
    statuses: list[LocationStatus]
    reporter_names: dict[str, str]


def resolve_location(db: Session, *, location_id: Optional[str] = None, qr_code_data: Optional[str] = None) -> Location:
    if location_id:
        location = db.get(Location, location_id)
    elif qr_code_data:
        location = location_service.get_by_qr(db, qr_code_data)
    else:
        raise ValueError("location_id or qr_code_data is required")
    if location is None:
        raise LookupError("Location not found")
    return location


def submit_report(
    db: Session,
    *,
    person_id: str,
    location: Location,
    data: bytes,
    content_type: Optional[str],
    storage: Optional[StorageProvider] = None,
    now: Optional[datetime] = None,
) -> CheckAreaReport:
    if not data:
        raise ValueError("photo is empty")
    extension_for(content_type)
    submitted = as_utc(now) if now is not None else datetime.now(timezone.utc)
    key = build_object_key(person_id, location.id, content_type, now_ms=int(submitted.timestamp() * 1000))
    provider = storage or get_storage_provider()
    try:
        stored = provider.save_bytes(data=data, content_type=content_type, key=key)
    except StorageError as exc:
        log_exception(logger, "Evidence upload failed", extra={"person_id": person_id, "key": key}, exc=exc)
        raise
    report = CheckAreaReport(
        person_id=person_id,
        location_id=location.id,
        photo_url=stored.public_url,
        storage_path=stored.storage_path,
        created_at=submitted,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info("Report stored id=%s person_id=%s location_id=%s", report.id, person_id, location.id)
    return report


def reports_query(
    db: Session,
    *,
    person_id: Optional[str] = None,
    location_id: Optional[str] = None,
    start_utc: Optional[datetime] = None,
    end_utc: Optional[datetime] = None,
):
    query = db.query(CheckAreaReport)
    if person_id:
        query = query.filter(CheckAreaReport.person_id == person_id)
    if location_id:
        query = query.filter(CheckAreaReport.location_id == location_id)
    if start_utc is not None:
        query = query.filter(CheckAreaReport.created_at >= start_utc)
    if end_utc is not None:
        query = query.filter(CheckAreaReport.created_at < end_utc)
    return query.order_by(CheckAreaReport.created_at.desc(), CheckAreaReport.id.desc())


def reports_in_window(db: Session, day: CheckingDay, *, person_id: Optional[str] = None) -> list[CheckAreaReport]:
    # oldest first; id breaks timestamp ties so the fold is repeatable
    return (
        reports_query(db, person_id=person_id, start_utc=day.window_start_utc, end_utc=day.window_end_utc)
        .order_by(None)
        .order_by(CheckAreaReport.created_at.asc(), CheckAreaReport.id.asc())
        .all()
    )


def person_names(db: Session, person_ids: Iterable[str]) -> dict[str, str]:
    ids = {pid for pid in person_ids if pid}
    if not ids:
        return {}
    return {p.id: p.full_name for p in db.query(Person).filter(Person.id.in_(ids)).all()}


def location_names(db: Session, location_ids: Iterable[str]) -> dict[str, str]:
    ids = {lid for lid in location_ids if lid}
    if not ids:
        return {}
    return {loc.id: loc.name for loc in db.query(Location).filter(Location.id.in_(ids)).all()}


def guard_dashboard(db: Session, person_id: str, now: datetime) -> Dashboard:
    """Locations assigned to ``person_id`` today, reconciled against their own reports."""
    day = resolve_checking_day(now)
    assigned = schedule_service.assigned_locations(db, person_id, day.label)
    statuses = reconcile(assigned, reports_in_window(db, day, person_id=person_id), person_id=person_id)
    return Dashboard(day=day, statuses=statuses, reporter_names=person_names(db, [person_id]))


def supervisor_dashboard(db: Session, label: date) -> Dashboard:
    """Every location for the checking day ``label``, checked by anyone."""
    day = checking_day_for_label(label)
    locations = location_service.list_locations(db)
    statuses = reconcile(locations, reports_in_window(db, day))
    names = person_names(db, (s.reported_by for s in statuses if s.reported_by))
    return Dashboard(day=day, statuses=statuses, reporter_names=names)
