"""
Asset registry API tests
"""
import io

from conftest import create_asset


def test_create_asset_issues_number(client):
    response = create_asset(client, category="Vehicles", entry_date="2026-02-14", value=385000)
    assert response.status_code == 201
    body = response.get_json()
    assert body["asset_number"] == "258-2026-05-01"
    assert body["status"] == "Operational"
    assert body["value"] == 385000.0


def test_create_ignores_client_supplied_number(client):
    response = create_asset(client, asset_number="258-2026-05-77")
    assert response.get_json()["asset_number"] == "258-2026-05-01"


def test_preview_then_create(client):
    create_asset(client, category="Tools & Equipment", entry_date="2026-02-14")

    preview = client.get("/assets/preview-number", query_string={
        "category": "Tools & Equipment", "entry_date": "2026-02-14",
    })
    assert preview.status_code == 200
    assert preview.get_json() == {"asset_number": "258-2026-04-02", "provisional": True}

    # preview is not a reservation
    again = client.get("/assets/preview-number", query_string={
        "category": "Tools & Equipment", "entry_date": "2026-02-14",
    })
    assert again.get_json()["asset_number"] == "258-2026-04-02"

    created = create_asset(client, category="Tools & Equipment", entry_date="2026-02-14")
    assert created.get_json()["asset_number"] == "258-2026-04-02"


def test_two_previews_before_commit_do_not_duplicate(client):
    query = {"category": "Vehicles", "entry_date": "2026-02-14"}
    first = client.get("/assets/preview-number", query_string=query).get_json()["asset_number"]
    second = client.get("/assets/preview-number", query_string=query).get_json()["asset_number"]
    assert first == second

    a = create_asset(client).get_json()["asset_number"]
    b = create_asset(client).get_json()["asset_number"]
    assert a == first
    assert b == "258-2026-05-02"


def test_preview_requires_valid_date(client):
    response = client.get("/assets/preview-number", query_string={
        "category": "Vehicles", "entry_date": "14/02/2026",
    })
    assert response.status_code == 400
    assert "entry_date" in response.get_json()["errors"]


def test_unknown_category_gets_fallback_code(client):
    response = create_asset(client, category="Drone Fleet")
    assert response.status_code == 201
    assert response.get_json()["asset_number"] == "258-2026-99-01"


def test_year_rollover(client):
    dec = create_asset(client, entry_date="2025-12-31").get_json()
    jan = create_asset(client, entry_date="2026-01-01").get_json()
    assert dec["asset_number"] == "258-2025-05-01"
    assert jan["asset_number"] == "258-2026-05-01"


def test_create_validation_errors(client):
    response = client.post("/assets/new", json={"name": "", "category": "Vehicles"})
    assert response.status_code == 400
    errors = response.get_json()["errors"]
    assert "name" in errors
    assert "entry_date" in errors


def test_create_rejects_null_or_malformed_entry_date(client):
    for entry_date in [None, 20260214, "", "14/02/2026", "2026-02-30"]:
        response = create_asset(client, entry_date=entry_date)
        assert response.status_code == 400, entry_date
        assert "entry_date" in response.get_json()["errors"]

    assert client.get("/assets/").get_json() == []
    assert create_asset(client).get_json()["asset_number"] == "258-2026-05-01"


def test_create_rejects_non_object_body(client):
    response = client.post("/assets/new", json=["Generator", "Vehicles"])
    assert response.status_code == 400
    assert {"name", "category", "entry_date"} <= set(response.get_json()["errors"])


def test_null_optional_fields_are_blank(client):
    response = create_asset(
        client, purchase_date=None, value=None, location=None, notes=None, serial_number=445201,
    )
    assert response.status_code == 201
    body = response.get_json()
    assert body["purchase_date"] is None
    assert body["value"] == 0.0
    assert body["location"] is None
    assert body["serial_number"] == "445201"


def test_edit_with_nulls_keeps_stored_values(client):
    asset = create_asset(client, location="Store room", value=1200).get_json()

    response = client.post(f"/assets/{asset['id']}/edit", json={
        "location": None, "value": None, "status": "Maintenance",
    })
    assert response.status_code == 200
    body = response.get_json()
    assert body["location"] == "Store room"
    assert body["value"] == 1200.0
    assert body["status"] == "Maintenance"

    bad = client.post(f"/assets/{asset['id']}/edit", json={"purchase_date": 20260101})
    assert bad.status_code == 400
    assert "purchase_date" in bad.get_json()["errors"]


def test_invalid_status_rejected(client):
    response = create_asset(client, status="Lost")
    assert response.status_code == 400
    assert "status" in response.get_json()["errors"]


def test_edit_keeps_number_category_and_entry_date(client):
    asset = create_asset(client, category="Vehicles", entry_date="2026-02-14").get_json()

    response = client.post(f"/assets/{asset['id']}/edit", json={
        "status": "Maintenance",
        "category": "Furniture, Fixtures & Fittings",
        "entry_date": "2027-01-01",
        "location": "Workshop",
    })
    assert response.status_code == 200
    body = response.get_json()
    assert body["asset_number"] == asset["asset_number"]
    assert body["category"] == "Vehicles"
    assert body["entry_date"] == "2026-02-14"
    assert body["status"] == "Maintenance"
    assert body["location"] == "Workshop"
    assert body["name"] == "Test asset"


def test_detail_includes_activity(client):
    response = client.post("/assets/new", json={
        "name": "Generator", "category": "Tools & Equipment", "entry_date": "2026-04-01",
    }, headers={"X-Portal-User": "Ahmed Riza"})
    asset = response.get_json()
    client.post(f"/assets/{asset['id']}/edit", json={"status": "Repair Needed"})

    detail = client.get(f"/assets/{asset['id']}").get_json()
    events = detail["events"]
    assert [e["event_type"] for e in events] == ["Updated", "Created"]
    assert events[1]["performed_by"] == "Ahmed Riza"
    assert "Operational -> Repair Needed" in events[0]["note"]


def test_delete_does_not_free_the_number(client):
    first = create_asset(client).get_json()
    assert client.post(f"/assets/{first['id']}/delete").status_code == 200
    assert client.get(f"/assets/{first['id']}").status_code == 404

    second = create_asset(client).get_json()
    assert second["asset_number"] == "258-2026-05-02"


def test_missing_asset_is_json_404(client):
    response = client.get("/assets/999")
    assert response.status_code == 404
    assert response.get_json()["status"] == 404


def test_list_filters_and_csv_export(client):
    create_asset(client, name="Pickup", category="Vehicles")
    create_asset(client, name="Desk", category="Furniture, Fixtures & Fittings")

    vehicles = client.get("/assets/", query_string={"category": "Vehicles"}).get_json()
    assert [a["name"] for a in vehicles] == ["Pickup"]

    found = client.get("/assets/", query_string={"q": "258-2026-07"}).get_json()
    assert [a["name"] for a in found] == ["Desk"]

    export = client.get("/assets/", query_string={"export": "csv"})
    assert export.status_code == 200
    assert export.mimetype == "text/csv"
    lines = export.get_data(as_text=True).strip().splitlines()
    assert lines[0].startswith("asset_number,name,category")
    assert len(lines) == 3


def test_csv_import_numbers_rows_in_order(client):
    create_asset(client, category="Vehicles", entry_date="2026-01-05")
    csv_body = (
        "asset_number,name,category,entry_date,value\n"
        ",Lorry,Vehicles,2026-02-01,120000\n"
        "258-2026-05-03,Boat,Vehicles,2026-02-02,\n"
        ",Bus,Vehicles,2026-02-03,90000\n"
    )
    response = client.post(
        "/assets/import",
        data={"file": (io.BytesIO(csv_body.encode("utf-8")), "assets.csv")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 201
    assert response.get_json()["asset_numbers"] == [
        "258-2026-05-02", "258-2026-05-03", "258-2026-05-04",
    ]


def test_csv_import_is_all_or_nothing(client):
    csv_body = (
        "name,category,entry_date\n"
        "Lorry,Vehicles,2026-02-01\n"
        "Boat,Vehicles,02/02/2026\n"
    )
    response = client.post(
        "/assets/import",
        data={"file": (io.BytesIO(csv_body.encode("utf-8")), "assets.csv")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert response.get_json()["errors"] == ["Row 3: dates must be YYYY-MM-DD."]
    assert client.get("/assets/").get_json() == []
