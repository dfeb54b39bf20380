import datetime

from tests.conftest import auth_headers


def _report(client, user, detail_id, pct, day):
    return client.post(
        "/api/work-progress/",
        json={
            "work_details_id": detail_id,
            "progress_percentage": pct,
            "report_date": day,
        },
        headers=auth_headers(user),
    )


def test_add_progress(client, operator, fleet):
    response = _report(client, operator, fleet["hull"], 90, "2026-03-07")

    assert response.status_code == 201
    body = response.json()
    assert body["progress_percentage"] == 90
    assert body["reporter_name"] == "Operation"


def test_duplicate_date_is_conflict(client, operator, fleet):
    response = _report(client, operator, fleet["hull"], 90, "2026-03-05")
    assert response.status_code == 409


def test_progress_cannot_decrease(client, operator, fleet):
    response = _report(client, operator, fleet["hull"], 60, "2026-03-07")
    assert response.status_code == 422
    assert "cannot go down" in response.json()["detail"]


def test_out_of_range_rejected(client, operator, fleet):
    response = _report(client, operator, fleet["paint"], 101, "2026-03-07")
    assert response.status_code == 422


def test_unknown_work_details(client, operator, fleet):
    response = _report(client, operator, 999, 10, "2026-03-07")
    assert response.status_code == 404


def test_finance_cannot_report_progress(client, finance, fleet):
    response = _report(client, finance, fleet["paint"], 10, "2026-03-07")
    assert response.status_code == 403


def test_list_is_newest_first_and_skips_deleted(client, operator, fleet):
    headers = auth_headers(operator)
    listing = client.get(
        "/api/work-progress/", params={"work_details_id": fleet["hull"]}, headers=headers
    ).json()
    assert [r["report_date"] for r in listing] == ["2026-03-05", "2026-03-02"]

    response = client.delete(f"/api/work-progress/{listing[0]['id']}", headers=headers)
    assert response.status_code == 200

    listing = client.get(
        "/api/work-progress/", params={"work_details_id": fleet["hull"]}, headers=headers
    ).json()
    assert [r["progress_percentage"] for r in listing] == [50]

    # With the 80 % report gone, 60 % is no longer a decrease
    assert _report(client, operator, fleet["hull"], 60, "2026-03-07").status_code == 201


def test_work_details_reflect_latest_progress(client, operator, fleet):
    response = client.get(f"/api/work-details/{fleet['hull']}", headers=auth_headers(operator))

    body = response.json()
    assert body["current_progress"] == 80
    assert body["latest_progress_date"] == "2026-03-05"
    assert body["progress_count"] == 2
    assert body["is_verified"] is True


def test_project_progress_summary_and_chart(client, operator, fleet):
    headers = auth_headers(operator)
    for pct, day in ((20, "2026-03-01"), (45, "2026-03-04")):
        response = client.post(
            "/api/project-progress/",
            json={"work_order_id": fleet["work_order"], "progress": pct, "report_date": day},
            headers=headers,
        )
        assert response.status_code == 201

    summaries = client.get("/api/project-progress/summaries", headers=headers).json()
    assert len(summaries) == 1
    assert summaries[0]["current_progress"] == 45
    assert summaries[0]["total_reports"] == 2
    assert summaries[0]["vessel_name"] == "KM Bahari"

    chart = client.get(f"/api/project-progress/chart/{fleet['work_order']}", headers=headers).json()
    assert [p["progress"] for p in chart] == [20, 45]


def test_dashboard_stats(client, operator, fleet):
    today = datetime.date.today().isoformat()
    client.post(
        "/api/project-progress/",
        json={"work_order_id": fleet["work_order"], "progress": 100, "report_date": today},
        headers=auth_headers(operator),
    )

    stats = client.get("/api/dashboard/stats", headers=auth_headers(operator)).json()

    assert stats["total_projects"] == 1
    assert stats["completed_projects"] == 1
    assert stats["projects_behind_schedule"] == 0
    assert stats["total_work_details"] == 1
    assert stats["average_details_progress"] == 80
