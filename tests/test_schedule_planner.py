from datetime import date

import pytest

from satpam.services.schedule_planner import (
    REASON_DUPLICATE,
    REASON_NO_LOCATIONS,
    AllBuildings,
    Building,
    BuildingTag,
    KnownLocation,
    RosterEntry,
    parse_building_selector,
    parse_building_tag,
    plan,
    resolve_selector,
)

DAY = date(2024, 3, 9)

LOCATIONS = [
    KnownLocation(id="W1", building=BuildingTag.WEST),
    KnownLocation(id="W2", building=BuildingTag.WEST),
    KnownLocation(id="E1", building=BuildingTag.EAST),
]


def test_all_buildings_expands_to_every_location():
    result = plan([RosterEntry(date=DAY, person_id="P1", selector=AllBuildings())], LOCATIONS, set())
    assert len(result.inserts) == 3
    assert {row.location_id for row in result.inserts} == {"W1", "W2", "E1"}
    assert all(row.date == DAY and row.person_id == "P1" for row in result.inserts)
    assert result.skipped == []


def test_building_selector_filters_locations():
    result = plan([RosterEntry(date=DAY, person_id="P1", selector=Building(BuildingTag.WEST))], LOCATIONS, set())
    assert [row.location_id for row in result.inserts] == ["W1", "W2"]


def test_duplicate_within_batch_skipped():
    entry = RosterEntry(date=DAY, person_id="P1")
    result = plan([entry, entry], LOCATIONS, set())
    assert len(result.inserts) == 3
    assert len(result.skipped) == 1
    assert result.skipped[0].reason == REASON_DUPLICATE


def test_same_person_different_building_same_day_is_duplicate():
    entries = [
        RosterEntry(date=DAY, person_id="P1", selector=Building(BuildingTag.WEST)),
        RosterEntry(date=DAY, person_id="P1", selector=Building(BuildingTag.EAST)),
    ]
    result = plan(entries, LOCATIONS, set())
    assert {row.location_id for row in result.inserts} == {"W1", "W2"}
    assert result.skipped[0].entry == entries[1]
    assert result.skipped[0].reason == REASON_DUPLICATE


def test_existing_assignment_skipped():
    result = plan([RosterEntry(date=DAY, person_id="P1")], LOCATIONS, {("P1", DAY)})
    assert result.inserts == []
    assert result.skipped[0].reason == REASON_DUPLICATE


def test_no_matching_locations():
    west_only = [loc for loc in LOCATIONS if loc.building == BuildingTag.WEST]
    entry = RosterEntry(date=DAY, person_id="P1", selector=Building(BuildingTag.EAST))
    result = plan([entry], west_only, set())
    assert result.inserts == []
    assert result.skipped[0].reason == REASON_NO_LOCATIONS


def test_no_matching_locations_does_not_block_later_entry():
    entries = [
        RosterEntry(date=DAY, person_id="P1", selector=Building(BuildingTag.EAST)),
        RosterEntry(date=DAY, person_id="P1", selector=Building(BuildingTag.WEST)),
    ]
    west_only = [loc for loc in LOCATIONS if loc.building == BuildingTag.WEST]
    result = plan(entries, west_only, set())
    assert len(result.inserts) == 2


def test_plan_is_idempotent():
    entries = [
        RosterEntry(date=DAY, person_id="P1"),
        RosterEntry(date=DAY, person_id="P2", selector=Building(BuildingTag.EAST)),
        RosterEntry(date=date(2024, 3, 10), person_id="P1"),
    ]
    first = plan(entries, LOCATIONS, set())
    seeded = {(row.person_id, row.date) for row in first.inserts}
    second = plan(entries, LOCATIONS, seeded)
    assert second.inserts == []
    assert len(second.skipped) == len(entries)


def test_each_entry_is_all_or_nothing():
    entries = [
        RosterEntry(date=DAY, person_id="P1"),
        RosterEntry(date=DAY, person_id="P2", selector=Building(BuildingTag.WEST)),
        RosterEntry(date=DAY, person_id="P1", selector=Building(BuildingTag.EAST)),
    ]
    result = plan(entries, LOCATIONS, set())
    for batch in result.batches:
        expected = {loc.id for loc in resolve_selector(batch.entry.selector, LOCATIONS)}
        assert {row.location_id for row in batch.rows} == expected
    skipped_keys = {(s.entry.person_id, s.entry.selector) for s in result.skipped}
    assert ("P1", Building(BuildingTag.EAST)) in skipped_keys


def test_untagged_location_only_in_all_buildings():
    locations = LOCATIONS + [KnownLocation(id="GATE", building=None)]
    all_result = plan([RosterEntry(date=DAY, person_id="P1")], locations, set())
    assert "GATE" in {row.location_id for row in all_result.inserts}
    west = plan([RosterEntry(date=DAY, person_id="P2", selector=Building(BuildingTag.WEST))], locations, set())
    assert "GATE" not in {row.location_id for row in west.inserts}


def test_resolve_selector_rejects_unknown_variant():
    with pytest.raises(TypeError):
        resolve_selector("West Building", LOCATIONS)


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, AllBuildings()),
        ("", AllBuildings()),
        ("All Buildings", AllBuildings()),
        ("west building", Building(BuildingTag.WEST)),
        (" East ", Building(BuildingTag.EAST)),
        ("Gedung Timur", Building(BuildingTag.EAST)),
    ],
)
def test_parse_building_selector(raw, expected):
    assert parse_building_selector(raw) == expected


def test_parse_building_selector_rejects_unknown():
    with pytest.raises(ValueError):
        parse_building_selector("North Building")


def test_parse_building_tag():
    assert parse_building_tag("West Building") == BuildingTag.WEST
    assert parse_building_tag(None) is None
    with pytest.raises(ValueError):
        parse_building_tag("All Buildings")
