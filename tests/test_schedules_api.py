from conftest import add_person, as_user


def _setup(api):
    admin = as_user(add_person(api.Session, username="boss", role="ADMIN"), "ADMIN")
    budi = add_person(api.Session, username="budi", first_name="Budi", last_name="Santoso")
    agus = add_person(api.Session, username="agus", first_name="Agus", last_name="Salim")
    for name, building in [("Lobby West", "West Building"), ("Parking West", "West Building"), ("Lobby East", "East Building")]:
        resp = api.client.post("/api/v1/locations", json={"name": name, "building": building}, headers=admin)
        assert resp.status_code == 201
    return admin, budi, agus


def test_roster_import_csv(api):
    admin, budi, agus = _setup(api)
    csv_body = "Tanggal,Nama Satpam\n2024-03-09,Budi Santoso\n2024-03-09,Agus Salim\n2024-03-09,Budi Santoso\n"
    resp = api.client.post(
        "/api/v1/schedules/import",
        files={"file": ("roster.csv", csv_body.encode("utf-8"), "text/csv")},
        data={"building": "West Building"},
        headers=admin,
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["inserted"] == 4
    assert body["entries_applied"] == 2
    assert len(body["skipped"]) == 1
    assert body["skipped"][0]["reason"] == "duplicate-assignment"
    assert body["skipped"][0]["building"] == "West Building"

    resp = api.client.get("/api/v1/schedules", params={"date": "2024-03-09"}, headers=admin)
    rows = resp.json()
    assert len(rows) == 4
    assert {r["person_name"] for r in rows} == {"Budi Santoso", "Agus Salim"}
    assert {r["location_name"] for r in rows} == {"Lobby West", "Parking West"}


def test_roster_import_rejects_whole_file(api):
    admin, _, _ = _setup(api)
    csv_body = "Tanggal,Nama Satpam\n2024-03-09,Budi Santoso\n2024-13-45,Agus Salim\n2024-03-09,Nobody Here\n"
    resp = api.client.post(
        "/api/v1/schedules/import",
        files={"file": ("roster.csv", csv_body.encode("utf-8"), "text/csv")},
        headers=admin,
    )
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert len(detail) == 2
    assert detail[0].startswith("Row 3:")
    assert detail[1].startswith("Row 4:")
    assert api.client.get("/api/v1/schedules", params={"date": "2024-03-09"}, headers=admin).json() == []


def test_roster_import_reports_name_collisions(api):
    admin, _, _ = _setup(api)
    twin = add_person(api.Session, username="budi2", first_name="Budi", last_name="Santoso")
    resp = api.client.post(
        "/api/v1/schedules/import",
        files={"file": ("roster.csv", b"Tanggal,Nama Satpam\n45360,Budi Santoso\n", "text/csv")},
        headers=admin,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["inserted"] == 3
    assert len(body["warnings"]) == 1
    assert "Budi Santoso" in body["warnings"][0]
    rows = api.client.get("/api/v1/schedules", params={"date": "2024-03-09"}, headers=admin).json()
    assert {r["person_id"] for r in rows} == {twin}


def test_bulk_and_single_create(api):
    admin, budi, agus = _setup(api)
    resp = api.client.post(
        "/api/v1/schedules/bulk",
        json={
            "entries": [
                {"date": "2024-03-09", "person_id": budi, "building": "East Building"},
                {"date": "2024-03-10", "person_id": budi},
            ]
        },
        headers=admin,
    )
    assert resp.status_code == 201
    assert resp.json()["inserted"] == 4

    resp = api.client.post("/api/v1/schedules", json={"date": "2024-03-09", "person_id": budi}, headers=admin)
    assert resp.json()["inserted"] == 0
    assert resp.json()["skipped"][0]["reason"] == "duplicate-assignment"

    resp = api.client.post("/api/v1/schedules", json={"date": "2024-03-09", "person_id": "missing"}, headers=admin)
    assert resp.status_code == 400
    resp = api.client.post(
        "/api/v1/schedules", json={"date": "2024-03-09", "person_id": agus, "building": "North"}, headers=admin
    )
    assert resp.status_code == 400


def test_delete_by_id_and_person_day(api):
    admin, budi, agus = _setup(api)
    api.client.post(
        "/api/v1/schedules/bulk",
        json={"entries": [{"date": "2024-03-09", "person_id": budi}, {"date": "2024-03-09", "person_id": agus}]},
        headers=admin,
    )
    rows = api.client.get("/api/v1/schedules", params={"date": "2024-03-09", "person_id": agus}, headers=admin).json()
    assert len(rows) == 3
    assert api.client.delete(f"/api/v1/schedules/{rows[0]['id']}", headers=admin).status_code == 200
    assert api.client.delete(f"/api/v1/schedules/{rows[0]['id']}", headers=admin).status_code == 404

    resp = api.client.delete("/api/v1/schedules", params={"person_id": budi, "date": "2024-03-09"}, headers=admin)
    assert resp.json()["deleted"] == 3
    remaining = api.client.get("/api/v1/schedules", params={"date": "2024-03-09"}, headers=admin).json()
    assert len(remaining) == 2


def test_orphaned_schedule_shows_unknown_location(api):
    admin, budi, _ = _setup(api)
    api.client.post("/api/v1/schedules", json={"date": "2024-03-09", "person_id": budi, "building": "East"}, headers=admin)
    east = [loc for loc in api.client.get("/api/v1/locations", headers=admin).json() if loc["building"] == "East Building"]
    assert api.client.delete(f"/api/v1/locations/{east[0]['id']}", headers=admin).status_code == 200
    rows = api.client.get("/api/v1/schedules", params={"date": "2024-03-09"}, headers=admin).json()
    assert len(rows) == 1
    assert rows[0]["location_name"] is None


def test_guard_cannot_write_schedules(api):
    _, budi, _ = _setup(api)
    resp = api.client.post(
        "/api/v1/schedules", json={"date": "2024-03-09", "person_id": budi}, headers=as_user(budi, "GUARD")
    )
    assert resp.status_code == 403


def test_roster_import_huge_serial_is_bad_request(api):
    admin, _, _ = _setup(api)
    resp = api.client.post(
        "/api/v1/schedules/import",
        files={"file": ("roster.csv", b"Tanggal,Nama Satpam\n99999999,Budi Santoso\n", "text/csv")},
        headers=admin,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == ["Row 2: Invalid date: 99999999"]
