"""
Schedule store: persists planner output and serves daily schedule lists.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.location import Location
from ..models.person import Person
from ..models.schedule import ScheduleEntry
from .schedule_planner import (
    REASON_DUPLICATE,
    KnownLocation,
    RosterEntry,
    SkippedEntry,
    parse_building_tag,
    plan,
)

logger = logging.getLogger("schedules")


@dataclass
class ApplyResult:
    inserted: list[ScheduleEntry] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)


@dataclass
class ScheduleView:
    entry: ScheduleEntry
    person_name: Optional[str]
    location_name: Optional[str]
    building: Optional[str]


def load_known_locations(db: Session) -> list[KnownLocation]:
    known: list[KnownLocation] = []
    for loc in db.query(Location).order_by(Location.created_at.asc(), Location.id.asc()).all():
        try:
            tag = parse_building_tag(loc.building)
        except ValueError:
            logger.warning("Location %s has unknown building %r; treated as untagged", loc.id, loc.building)
            tag = None
        known.append(KnownLocation(id=loc.id, building=tag))
    return known


def load_existing_assignments(db: Session, dates: Iterable[date]) -> set[tuple[str, date]]:
    days = sorted(set(dates))
    if not days:
        return set()
    rows = (
        db.query(ScheduleEntry.person_id, ScheduleEntry.schedule_date)
        .filter(ScheduleEntry.schedule_date.in_(days))
        .distinct()
        .all()
    )
    return {(person_id, day) for person_id, day in rows}


def _is_assigned(db: Session, person_id: str, day: date) -> bool:
    return (
        db.query(ScheduleEntry.id)
        .filter(ScheduleEntry.person_id == person_id, ScheduleEntry.schedule_date == day)
        .first()
        is not None
    )


def apply_roster(db: Session, entries: list[RosterEntry]) -> ApplyResult:
    """Plan ``entries`` against the current store and write each entry in its own savepoint.

    A concurrent writer can assign the same person and date between the
    snapshot and the insert; the re-check and the unique constraint turn
    that into a ``duplicate-assignment`` skip instead of a partial write.
    """
    result = ApplyResult()
    planned = plan(
        entries,
        load_known_locations(db),
        load_existing_assignments(db, (entry.date for entry in entries)),
    )
    result.skipped.extend(planned.skipped)

    for batch in planned.batches:
        entry = batch.entry
        if _is_assigned(db, entry.person_id, entry.date):
            result.skipped.append(SkippedEntry(entry=entry, reason=REASON_DUPLICATE))
            continue
        rows = [
            ScheduleEntry(schedule_date=row.date, person_id=row.person_id, location_id=row.location_id)
            for row in batch.rows
        ]
        try:
            with db.begin_nested():
                db.add_all(rows)
                db.flush()
        except IntegrityError as exc:
            logger.warning(
                "Schedule entry rejected by store person_id=%s date=%s: %s",
                entry.person_id,
                entry.date,
                exc.orig,
            )
            result.skipped.append(SkippedEntry(entry=entry, reason=REASON_DUPLICATE))
            continue
        result.inserted.extend(rows)

    db.commit()
    logger.info(
        "Roster applied entries=%s inserted_rows=%s skipped=%s",
        len(entries),
        len(result.inserted),
        len(result.skipped),
    )
    return result


def list_for_date(db: Session, day: date, *, person_id: Optional[str] = None) -> list[ScheduleView]:
    query = (
        db.query(ScheduleEntry, Person, Location)
        .join(Person, Person.id == ScheduleEntry.person_id)
        .outerjoin(Location, Location.id == ScheduleEntry.location_id)
        .filter(ScheduleEntry.schedule_date == day)
    )
    if person_id:
        query = query.filter(ScheduleEntry.person_id == person_id)
    rows = query.order_by(Person.first_name.asc(), Person.last_name.asc(), Location.name.asc()).all()
    return [
        ScheduleView(
            entry=entry,
            person_name=person.full_name,
            location_name=location.name if location else None,
            building=location.building if location else None,
        )
        for entry, person, location in rows
    ]


def assigned_locations(db: Session, person_id: str, day: date) -> list[Location]:
    """Locations a person must check on ``day``; orphaned schedule rows drop out."""
    return (
        db.query(Location)
        .join(ScheduleEntry, ScheduleEntry.location_id == Location.id)
        .filter(ScheduleEntry.person_id == person_id, ScheduleEntry.schedule_date == day)
        .order_by(Location.name.asc())
        .all()
    )


def delete_schedule(db: Session, schedule_id: str) -> bool:
    entry = db.get(ScheduleEntry, schedule_id)
    if entry is None:
        return False
    db.delete(entry)
    db.commit()
    return True


def delete_person_day(db: Session, person_id: str, day: date) -> int:
    deleted = (
        db.query(ScheduleEntry)
        .filter(ScheduleEntry.person_id == person_id, ScheduleEntry.schedule_date == day)
        .delete(synchronize_session=False)
    )
    db.commit()
    return int(deleted or 0)
