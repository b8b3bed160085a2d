from datetime import date

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from satpam.core.db import configure_sqlite
from satpam.models import Base
from satpam.models.check_area_report import CheckAreaReport
from satpam.models.location import Location
from satpam.models.person import Person
from satpam.models.schedule import ScheduleEntry
from satpam.services import personnel as personnel_service
from satpam.services import schedules as schedule_service
from satpam.services.schedule_planner import (
    REASON_DUPLICATE,
    REASON_NO_LOCATIONS,
    Building,
    BuildingTag,
    RosterEntry,
)

DAY = date(2024, 3, 9)


def _make_session():
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    configure_sqlite(engine)
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    return SessionLocal()


def _seed(db):
    people = [
        Person(id="P1", username="budi", password_hash="x", first_name="Budi", last_name="Santoso", role="GUARD"),
        Person(id="P2", username="agus", password_hash="x", first_name="Agus", last_name="Salim", role="GUARD"),
    ]
    locations = [
        Location(id="W1", name="Lobby West", building="West Building", qr_code_data="qr-w1"),
        Location(id="W2", name="Parking West", building="West Building", qr_code_data="qr-w2"),
        Location(id="E1", name="Lobby East", building="East Building", qr_code_data="qr-e1"),
    ]
    db.add_all(people + locations)
    db.commit()


def test_apply_roster_inserts_and_skips():
    db = _make_session()
    _seed(db)
    result = schedule_service.apply_roster(
        db,
        [
            RosterEntry(date=DAY, person_id="P1"),
            RosterEntry(date=DAY, person_id="P1", selector=Building(BuildingTag.EAST)),
            RosterEntry(date=DAY, person_id="P2", selector=Building(BuildingTag.WEST)),
        ],
    )
    assert len(result.inserted) == 5
    assert [s.reason for s in result.skipped] == [REASON_DUPLICATE]
    assert db.query(ScheduleEntry).count() == 5


def test_apply_roster_twice_is_idempotent():
    db = _make_session()
    _seed(db)
    entries = [RosterEntry(date=DAY, person_id="P1"), RosterEntry(date=DAY, person_id="P2")]
    schedule_service.apply_roster(db, entries)
    second = schedule_service.apply_roster(db, entries)
    assert second.inserted == []
    assert len(second.skipped) == 2
    assert db.query(ScheduleEntry).count() == 6


def test_no_matching_locations_reported():
    db = _make_session()
    db.add(Person(id="P1", username="budi", password_hash="x", first_name="Budi", last_name="Santoso"))
    db.add(Location(id="W1", name="Lobby West", building="West Building", qr_code_data="qr-w1"))
    db.commit()
    result = schedule_service.apply_roster(
        db, [RosterEntry(date=DAY, person_id="P1", selector=Building(BuildingTag.EAST))]
    )
    assert result.inserted == []
    assert result.skipped[0].reason == REASON_NO_LOCATIONS


def test_store_conflict_rolls_back_whole_entry(monkeypatch):
    db = _make_session()
    _seed(db)
    # a row written by a concurrent import after the snapshot was taken
    db.add(ScheduleEntry(schedule_date=DAY, person_id="P1", location_id="E1"))
    db.commit()
    monkeypatch.setattr(schedule_service, "load_existing_assignments", lambda _db, _dates: set())
    monkeypatch.setattr(schedule_service, "_is_assigned", lambda _db, _pid, _day: False)

    result = schedule_service.apply_roster(
        db,
        [RosterEntry(date=DAY, person_id="P1"), RosterEntry(date=DAY, person_id="P2", selector=Building(BuildingTag.EAST))],
    )
    assert [s.entry.person_id for s in result.skipped] == ["P1"]
    assert result.skipped[0].reason == REASON_DUPLICATE
    p1_rows = db.query(ScheduleEntry).filter(ScheduleEntry.person_id == "P1").all()
    assert [row.location_id for row in p1_rows] == ["E1"]
    assert db.query(ScheduleEntry).filter(ScheduleEntry.person_id == "P2").count() == 1


def test_list_for_date_includes_orphans():
    db = _make_session()
    _seed(db)
    schedule_service.apply_roster(db, [RosterEntry(date=DAY, person_id="P1", selector=Building(BuildingTag.WEST))])
    db.delete(db.get(Location, "W2"))
    db.commit()

    views = schedule_service.list_for_date(db, DAY)
    assert len(views) == 2
    by_location = {v.entry.location_id: v for v in views}
    assert by_location["W1"].location_name == "Lobby West"
    assert by_location["W2"].location_name is None
    assert all(v.person_name == "Budi Santoso" for v in views)

    assigned = schedule_service.assigned_locations(db, "P1", DAY)
    assert [loc.id for loc in assigned] == ["W1"]


def test_delete_schedule_and_person_day():
    db = _make_session()
    _seed(db)
    schedule_service.apply_roster(db, [RosterEntry(date=DAY, person_id="P1"), RosterEntry(date=DAY, person_id="P2")])
    one = db.query(ScheduleEntry).filter(ScheduleEntry.person_id == "P2").first()
    assert schedule_service.delete_schedule(db, one.id) is True
    assert schedule_service.delete_schedule(db, one.id) is False
    assert schedule_service.delete_person_day(db, "P1", DAY) == 3
    assert db.query(ScheduleEntry).count() == 2


def test_deleting_person_cascades_schedules_and_reports():
    db = _make_session()
    _seed(db)
    schedule_service.apply_roster(db, [RosterEntry(date=DAY, person_id="P1")])
    db.add(CheckAreaReport(person_id="P1", location_id="W1", photo_url="http://x/1.jpg"))
    db.commit()

    personnel_service.delete_person(db, db.get(Person, "P1"))
    assert db.query(ScheduleEntry).count() == 0
    assert db.query(CheckAreaReport).count() == 0


def test_untagged_location_logged_and_kept(caplog):
    db = _make_session()
    db.add(Location(id="X1", name="Roof", building="Rooftop", qr_code_data="qr-x1"))
    db.commit()
    known = schedule_service.load_known_locations(db)
    assert known[0].id == "X1" and known[0].building is None
    assert any("unknown building" in rec.getMessage() for rec in caplog.records)
