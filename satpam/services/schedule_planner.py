"""
Expansion of roster entries into per-location schedule rows.

A roster entry says "this person guards this building (or every
building) on this date". The planner turns each entry into one row per
matching location, never assigns a person twice on the same date, and
keeps each entry all-or-nothing so the store can apply it atomically.
The planner is pure: callers fetch locations and existing assignments
first and persist the result afterwards.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Union

REASON_DUPLICATE = "duplicate-assignment"
REASON_NO_LOCATIONS = "no-matching-locations"


class BuildingTag(str, enum.Enum):
    WEST = "West Building"
    EAST = "East Building"


@dataclass(frozen=True)
class AllBuildings:
    label = "All Buildings"


@dataclass(frozen=True)
class Building:
    tag: BuildingTag

    @property
    def label(self) -> str:
        return self.tag.value


BuildingSelector = Union[AllBuildings, Building]

_SELECTOR_ALIASES: dict[str, BuildingSelector] = {
    "all buildings": AllBuildings(),
    "all": AllBuildings(),
    "semua gedung": AllBuildings(),
    "west building": Building(BuildingTag.WEST),
    "west": Building(BuildingTag.WEST),
    "gedung barat": Building(BuildingTag.WEST),
    "east building": Building(BuildingTag.EAST),
    "east": Building(BuildingTag.EAST),
    "gedung timur": Building(BuildingTag.EAST),
}


def parse_building_tag(value: Optional[str]) -> Optional[BuildingTag]:
    """Parse a stored/incoming location tag; empty means "no building"."""
    if value is None or not str(value).strip():
        return None
    selector = _SELECTOR_ALIASES.get(str(value).strip().lower())
    if isinstance(selector, Building):
        return selector.tag
    raise ValueError(f"Invalid building: {value}")


def parse_building_selector(value: Optional[str]) -> BuildingSelector:
    if value is None or not str(value).strip():
        return AllBuildings()
    selector = _SELECTOR_ALIASES.get(str(value).strip().lower())
    if selector is None:
        raise ValueError(f"Invalid building selector: {value}")
    return selector


@dataclass(frozen=True)
class KnownLocation:
    id: str
    building: Optional[BuildingTag] = None


@dataclass(frozen=True)
class RosterEntry:
    date: date
    person_id: str
    selector: BuildingSelector = AllBuildings()


@dataclass(frozen=True)
class ScheduleInsert:
    date: date
    person_id: str
    location_id: str


@dataclass(frozen=True)
class SkippedEntry:
    entry: RosterEntry
    reason: str


@dataclass
class PlannedBatch:
    """All rows produced by one roster entry; applied as a unit."""

    entry: RosterEntry
    rows: list[ScheduleInsert]


@dataclass
class PlanResult:
    batches: list[PlannedBatch] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)

    @property
    def inserts(self) -> list[ScheduleInsert]:
        return [row for batch in self.batches for row in batch.rows]


def resolve_selector(selector: BuildingSelector, known_locations: Iterable[KnownLocation]) -> list[KnownLocation]:
    if isinstance(selector, AllBuildings):
        return list(known_locations)
    if isinstance(selector, Building):
        return [loc for loc in known_locations if loc.building == selector.tag]
    raise TypeError(f"Unsupported building selector: {selector!r}")


def plan(
    entries: Iterable[RosterEntry],
    known_locations: Iterable[KnownLocation],
    existing_assignments: Iterable[tuple[str, date]],
) -> PlanResult:
    locations = list(known_locations)
    assigned: set[tuple[str, date]] = set(existing_assignments)
    result = PlanResult()

    for entry in entries:
        key = (entry.person_id, entry.date)
        if key in assigned:
            result.skipped.append(SkippedEntry(entry=entry, reason=REASON_DUPLICATE))
            continue
        targets = resolve_selector(entry.selector, locations)
        if not targets:
            result.skipped.append(SkippedEntry(entry=entry, reason=REASON_NO_LOCATIONS))
            continue
        result.batches.append(
            PlannedBatch(
                entry=entry,
                rows=[ScheduleInsert(date=entry.date, person_id=entry.person_id, location_id=loc.id) for loc in targets],
            )
        )
        assigned.add(key)
    return result
