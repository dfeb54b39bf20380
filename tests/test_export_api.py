import csv
import io
import re

from tests.conftest import auth_headers


def _rows(response):
    return list(csv.DictReader(io.StringIO(response.text)))


def test_full_export_for_financial_role(client, master, fleet):
    response = client.get("/api/export/vessels", headers=auth_headers(master))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert re.search(r'filename="vessel_data_all_vessels_\d{4}-\d{2}-\d{2}_full\.csv"', disposition)
    assert response.headers["x-total-records"] == "4"

    rows = _rows(response)
    assert "payment_price" in rows[0]
    # Hull has two reports, painting none, Sea Star no work orders
    assert [r["vessel_name"] for r in rows] == ["KM Bahari", "KM Bahari", "KM Bahari", "Sea Star"]
    hull_rows = [r for r in rows if r["work_detail_id"] == str(fleet["hull"])]
    assert sorted(r["progress_percentage"] for r in hull_rows) == ["50", "80"]
    assert all(r["wd_current_progress"] == "80" for r in hull_rows)
    assert all(r["verification_date"] == "2026-03-06" for r in hull_rows)

    paint_row = next(r for r in rows if r["work_detail_id"] == str(fleet["paint"]))
    assert paint_row["progress_id"] == ""
    assert paint_row["wd_progress_count"] == "0"
    assert paint_row["work_description"] == "Painting, 2 coats"

    bahari = rows[0]
    assert bahari["wo_overall_progress"] == "40"
    assert bahari["wo_is_fully_completed"] == "false"
    assert bahari["wo_verification_status"] == "true"
    assert bahari["invoice_number"] == "INV-001"
    assert bahari["payment_status"] == "false"

    star = rows[-1]
    assert star["work_order_id"] == ""
    assert star["invoice_number"] == ""


def test_operational_export_drops_financial_columns(client, operator, fleet):
    response = client.get("/api/export/vessels", headers=auth_headers(operator))

    assert response.status_code == 200
    assert "_operational.csv" in response.headers["content-disposition"]
    header = response.text.split("\n", 1)[0].split(",")
    assert "payment_price" not in header
    assert "invoice_number" in header


def test_single_vessel_scope_uses_sanitized_name(client, finance, fleet):
    response = client.get(
        "/api/export/vessels",
        params={"vessel_ids": [fleet["star"]]},
        headers=auth_headers(finance),
    )

    assert response.status_code == 200
    assert "vessel_data_Sea_Star_" in response.headers["content-disposition"]
    assert response.headers["x-total-records"] == "1"


def test_multiple_vessels_scope(client, master, fleet):
    response = client.get(
        "/api/export/vessels",
        params={"vessel_ids": [fleet["star"], fleet["bahari"]]},
        headers=auth_headers(master),
    )

    assert "vessel_data_2_vessels_" in response.headers["content-disposition"]
    assert response.headers["x-total-records"] == "4"


def test_no_matching_vessels_gives_empty_body(client, master, fleet):
    response = client.get(
        "/api/export/vessels",
        params={"vessel_ids": [999]},
        headers=auth_headers(master),
    )

    assert response.status_code == 200
    assert response.text == ""
    assert response.headers["x-total-records"] == "0"
    assert "vessel_data_vessel_999_" in response.headers["content-disposition"]


def test_deleted_vessels_are_not_exported(client, master, fleet):
    response = client.delete(f"/api/vessels/{fleet['star']}", headers=auth_headers(master))
    assert response.status_code == 200

    response = client.get("/api/export/vessels", headers=auth_headers(master))
    assert [r["vessel_name"] for r in _rows(response)] == ["KM Bahari"] * 3


def test_export_requires_authentication(client):
    assert client.get("/api/export/vessels").status_code == 401
