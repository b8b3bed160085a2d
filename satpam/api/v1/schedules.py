"""
Schedule endpoints: daily lists, manual and bulk assignment, roster import.

Reads are open to reviewers; writes are admin only.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from ...core.auth import ROLE_ADMIN, ROLE_SUPERVISOR, UserContext, require_roles
from ...core.db import get_db
from ...core.request_limits import read_roster_bytes_async
from ...models.person import Person
from ...schemas.schedule import (
    ScheduleBulkCreate,
    ScheduleCreate,
    ScheduleImportSummary,
    ScheduleResponse,
    SkippedScheduleOut,
)
from ...services import schedules as schedule_service
from ...services.directory import build_index
from ...services.roster_import import RosterImportError, read_roster, resolve_roster
from ...services.schedule_planner import RosterEntry, parse_building_selector


router = APIRouter(prefix="/api/v1/schedules", tags=["schedules"])
logger = logging.getLogger("schedules")


def _summary(result: schedule_service.ApplyResult, warnings: list[str] | None = None) -> ScheduleImportSummary:
    applied = {(row.person_id, row.schedule_date) for row in result.inserted}
    return ScheduleImportSummary(
        inserted=len(result.inserted),
        entries_applied=len(applied),
        skipped=[
            SkippedScheduleOut(
                date=s.entry.date,
                person_id=s.entry.person_id,
                building=s.entry.selector.label,
                reason=s.reason,
            )
            for s in result.skipped
        ],
        warnings=list(warnings or []),
    )


def _entries_from_payload(db: Session, items: List[ScheduleCreate]) -> list[RosterEntry]:
    person_ids = {item.person_id for item in items}
    known = {row[0] for row in db.query(Person.id).filter(Person.id.in_(person_ids)).all()}
    errors: list[str] = []
    entries: list[RosterEntry] = []
    for idx, item in enumerate(items, start=1):
        if item.person_id not in known:
            errors.append(f"Entry {idx}: unknown person {item.person_id}")
            continue
        try:
            selector = parse_building_selector(item.building)
        except ValueError as exc:
            errors.append(f"Entry {idx}: {exc}")
            continue
        entries.append(RosterEntry(date=item.date, person_id=item.person_id, selector=selector))
    if errors:
        raise HTTPException(status_code=400, detail=errors)
    return entries


@router.get("", response_model=List[ScheduleResponse])
def list_schedules(
    schedule_date: date = Query(..., alias="date"),
    person_id: str | None = Query(None),
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN, ROLE_SUPERVISOR)),
) -> List[ScheduleResponse]:
    views = schedule_service.list_for_date(db, schedule_date, person_id=person_id)
    return [
        ScheduleResponse(
            id=v.entry.id,
            schedule_date=v.entry.schedule_date,
            person_id=v.entry.person_id,
            person_name=v.person_name,
            location_id=v.entry.location_id,
            location_name=v.location_name,
            building=v.building,
        )
        for v in views
    ]


@router.post("", status_code=201, response_model=ScheduleImportSummary)
def create_schedule(
    payload: ScheduleCreate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN)),
) -> ScheduleImportSummary:
    entries = _entries_from_payload(db, [payload])
    return _summary(schedule_service.apply_roster(db, entries))


@router.post("/bulk", status_code=201, response_model=ScheduleImportSummary)
def bulk_create_schedules(
    payload: ScheduleBulkCreate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN)),
) -> ScheduleImportSummary:
    entries = _entries_from_payload(db, payload.entries)
    return _summary(schedule_service.apply_roster(db, entries))


@router.post("/import", status_code=201, response_model=ScheduleImportSummary)
async def import_roster(
    file: UploadFile = File(...),
    building: str | None = Form(None),
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN)),
) -> ScheduleImportSummary:
    try:
        default_selector = parse_building_selector(building)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    raw = await read_roster_bytes_async(file)
    try:
        rows = read_roster(raw, filename=file.filename, content_type=file.content_type)
        directory = build_index(db.query(Person).order_by(Person.created_at.asc(), Person.id.asc()).all())
        entries = resolve_roster(rows, directory, default_selector=default_selector)
    except RosterImportError as exc:
        logger.info("Roster import rejected filename=%s errors=%s", file.filename, len(exc.errors))
        raise HTTPException(status_code=400, detail=exc.errors)
    result = schedule_service.apply_roster(db, entries)
    return _summary(result, warnings=directory.collisions)


@router.delete("/{schedule_id}")
def delete_schedule(
    schedule_id: str,
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN)),
) -> dict:
    if not schedule_service.delete_schedule(db, schedule_id):
        raise HTTPException(status_code=404, detail="Schedule not found")
    return {"status": "deleted", "id": schedule_id}


@router.delete("")
def delete_person_day(
    person_id: str = Query(...),
    schedule_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    user: UserContext = Depends(require_roles(ROLE_ADMIN)),
) -> dict:
    deleted = schedule_service.delete_person_day(db, person_id, schedule_date)
    return {"status": "deleted", "person_id": person_id, "date": schedule_date.isoformat(), "deleted": deleted}
