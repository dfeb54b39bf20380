from tests.conftest import auth_headers


def _upload(client, user, entity, text, filename="data.csv", **form):
    return client.post(
        f"/api/import/{entity}",
        files={"file": (filename, text.encode("utf-8"), "text/csv")},
        data={key: str(value).lower() for key, value in form.items()},
        headers=auth_headers(user),
    )


def _vessel_names(client, user):
    return sorted(v["name"] for v in client.get("/api/vessels/", headers=auth_headers(user)).json())


def test_import_vessels(client, master):
    response = _upload(client, master, "vessels", "Name,Type,Company\nKM Baru,Tug,PT A\nMV Dua,,\n")

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["format"] == "CSV"
    assert body["total_records"] == 2
    assert body["imported_count"] == 2
    assert _vessel_names(client, master) == ["KM Baru", "MV Dua"]


def test_validate_only_writes_nothing(client, master):
    body = _upload(client, master, "vessels", "name\nKM Baru\n", validate_only=True).json()

    assert body["success"] is True
    assert body["imported_count"] == 0
    assert body["message"].startswith("Validation completed. 1 records")
    assert _vessel_names(client, master) == []


def test_missing_required_column(client, master):
    body = _upload(client, master, "vessels", "type,company\nTug,PT A\n").json()

    assert body["success"] is False
    assert "Missing required column 'name'" in body["errors"]


def test_bad_cell_blocks_whole_file(client, master, fleet):
    text = (
        "vessel_id,shipyard_wo_number,shipyard_wo_date\n"
        f"{fleet['star']},SWO-10,2026-04-01\n"
        f"{fleet['star']},SWO-11,01/04/2026\n"
    )
    body = _upload(client, master, "work_orders", text).json()

    assert body["success"] is False
    assert body["errors"][0].startswith("Row 3: 'shipyard_wo_date'")
    listing = client.get(
        "/api/work-orders/", params={"vessel_id": fleet["star"]}, headers=auth_headers(master)
    ).json()
    assert listing == []


def test_unknown_columns_are_warned(client, master):
    body = _upload(client, master, "vessels", "name,flag\nKM Baru,ID\n").json()

    assert body["imported_count"] == 1
    assert body["warnings"] == ["Ignored columns: flag"]


def test_progress_import_follows_progress_rules(client, master, fleet):
    hull = fleet["hull"]
    decreasing = f"work_details_id,progress_percentage,report_date\n{hull},70,2026-03-08\n"
    body = _upload(client, master, "work_progress", decreasing).json()
    assert body["success"] is False
    assert "cannot go down" in body["errors"][0]

    mixed = (
        "work_details_id,progress_percentage,report_date\n"
        f"{hull},85,2026-03-05\n"
        f"{hull},90,2026-03-09\n"
    )
    body = _upload(client, master, "work_progress", mixed).json()
    assert body["imported_count"] == 1
    assert body["skipped_count"] == 1

    detail = client.get(f"/api/work-details/{hull}", headers=auth_headers(master)).json()
    assert detail["current_progress"] == 90


def test_existing_ids_skipped_or_overwritten(client, master, fleet):
    text = f"id,name\n{fleet['star']},Sea Star II\n"

    body = _upload(client, master, "vessels", text).json()
    assert body["imported_count"] == 0
    assert body["skipped_count"] == 1

    body = _upload(client, master, "vessels", text, overwrite=True).json()
    assert body["imported_count"] == 1
    assert "Sea Star II" in _vessel_names(client, master)


def test_large_file_is_written_in_batches(client, master):
    lines = ["name"] + [f"Vessel {i:03d}" for i in range(150)]
    body = _upload(client, master, "vessels", "\n".join(lines)).json()

    assert body["imported_count"] == 150
    assert len(_vessel_names(client, master)) == 150


def test_unknown_entity(client, master):
    assert _upload(client, master, "profiles", "name\nx\n").status_code == 422


def test_empty_file(client, master):
    assert _upload(client, master, "vessels", "").status_code == 422


def test_import_requires_capability(client, operator):
    assert _upload(client, operator, "vessels", "name\nx\n").status_code == 403


def test_entities_listing(client, master):
    entities = client.get("/api/import/entities", headers=auth_headers(master)).json()
    progress = next(e for e in entities if e["entity"] == "work_progress")
    assert progress["required"] == ["work_details_id", "progress_percentage", "report_date"]


def _hull_reports(client, user, hull):
    return client.get(
        "/api/work-progress/", params={"work_details_id": hull}, headers=auth_headers(user)
    ).json()


def test_overwrite_cannot_move_report_onto_taken_date(client, master, fleet):
    hull = fleet["hull"]
    first = next(r for r in _hull_reports(client, master, hull) if r["report_date"] == "2026-03-02")
    text = f"id,work_details_id,progress_percentage,report_date\n{first['id']},{hull},10,2026-03-05\n"

    body = _upload(client, master, "work_progress", text, overwrite=True).json()

    assert body["success"] is False
    assert "2026-03-05 already exists" in body["errors"][0]
    dates = [r["report_date"] for r in _hull_reports(client, master, hull)]
    assert dates.count("2026-03-05") == 1


def test_overwrite_follows_progress_rules(client, master, fleet):
    hull = fleet["hull"]
    latest = next(r for r in _hull_reports(client, master, hull) if r["report_date"] == "2026-03-05")
    header = "id,work_details_id,progress_percentage,report_date\n"

    lowered = f"{header}{latest['id']},{hull},40,2026-03-05\n"
    body = _upload(client, master, "work_progress", lowered, overwrite=True).json()
    assert body["success"] is False
    assert "cannot go down" in body["errors"][0]

    raised = f"{header}{latest['id']},{hull},85,2026-03-05\n"
    body = _upload(client, master, "work_progress", raised, overwrite=True).json()
    assert body["success"] is True
    assert body["imported_count"] == 1

    detail = client.get(f"/api/work-details/{hull}", headers=auth_headers(master)).json()
    assert detail["current_progress"] == 85
    assert len(_hull_reports(client, master, hull)) == 2


def test_one_invoice_per_work_order(client, master, fleet):
    wo = fleet["work_order"]
    existing = client.get("/api/invoices/", headers=auth_headers(master)).json()["items"][0]["id"]
    text = f"work_order_id,invoice_number\n{wo},INV-002\n"

    body = _upload(client, master, "invoice_details", text).json()
    assert body["success"] is False
    assert body["errors"] == [f"Record 1: work order {wo} already has invoice {existing}."]

    body = _upload(client, master, "invoice_details", text, skip_duplicates=True).json()
    assert body["imported_count"] == 0
    assert body["skipped_count"] == 1

    invoices = client.get("/api/invoices/", headers=auth_headers(master)).json()["items"]
    assert [i["invoice_number"] for i in invoices] == ["INV-001"]


def test_one_invoice_per_work_order_within_file(client, master, fleet):
    work_order = _upload(
        client, master, "work_orders", f"vessel_id,shipyard_wo_number\n{fleet['star']},SWO-20\n"
    )
    assert work_order.json()["imported_count"] == 1
    wo = client.get(
        "/api/work-orders/", params={"vessel_id": fleet["star"]}, headers=auth_headers(master)
    ).json()[0]["id"]

    text = f"work_order_id,invoice_number\n{wo},INV-010\n{wo},INV-011\n"
    body = _upload(client, master, "invoice_details", text).json()

    assert body["success"] is False
    assert body["errors"] == [f"Record 2: work order {wo} already has an invoice in record 1."]


def test_deleted_parent_rejects_records(client, master, fleet):
    paint = fleet["paint"]
    assert client.delete(f"/api/work-details/{paint}", headers=auth_headers(master)).status_code == 200

    text = f"work_details_id,progress_percentage,report_date\n{paint},10,2026-03-10\n"
    body = _upload(client, master, "work_progress", text).json()

    assert body["success"] is False
    assert body["imported_count"] == 0
    assert body["errors"] == [f"Record 1: work details {paint} does not exist."]


def test_missing_parent_rejects_records(client, master):
    body = _upload(client, master, "work_details", "work_order_id,description\n999,Hull\n").json()

    assert body["success"] is False
    assert body["errors"] == ["Record 1: work order 999 does not exist."]
