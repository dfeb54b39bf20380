from tests.conftest import auth_headers


def test_work_order_aggregates_details(client, operator, fleet):
    response = client.get(f"/api/work-orders/{fleet['work_order']}", headers=auth_headers(operator))

    assert response.status_code == 200
    body = response.json()
    assert body["vessel_name"] == "KM Bahari"
    assert body["overall_progress"] == 40
    assert body["is_fully_completed"] is False
    assert body["verification_status"] is True
    assert body["work_details_count"] == 2
    assert body["has_invoice"] is True
    assert [d["description"] for d in body["work_details"]] == ["Hull blasting", "Painting, 2 coats"]


def test_create_and_list_work_orders(client, operator, fleet):
    headers = auth_headers(operator)
    response = client.post(
        "/api/work-orders/",
        json={"vessel_id": fleet["star"], "shipyard_wo_number": "SWO-002"},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["overall_progress"] == 0

    listing = client.get(
        "/api/work-orders/", params={"vessel_id": fleet["star"]}, headers=headers
    ).json()
    assert [wo["shipyard_wo_number"] for wo in listing] == ["SWO-002"]


def test_work_order_for_unknown_vessel(client, operator, fleet):
    response = client.post("/api/work-orders/", json={"vessel_id": 999}, headers=auth_headers(operator))
    assert response.status_code == 422


def test_deleted_detail_leaves_aggregate(client, operator, fleet):
    headers = auth_headers(operator)
    assert client.delete(f"/api/work-details/{fleet['paint']}", headers=headers).status_code == 200

    body = client.get(f"/api/work-orders/{fleet['work_order']}", headers=headers).json()
    assert body["overall_progress"] == 80
    assert body["work_details_count"] == 1


def test_new_verification_replaces_previous(client, operator, fleet):
    headers = auth_headers(operator)
    url = f"/api/work-details/{fleet['hull']}/verification"

    response = client.post(url, json={"work_verification": False}, headers=headers)
    assert response.status_code == 201

    current = client.get(url, headers=headers).json()
    assert current["work_verification"] is False

    body = client.get(f"/api/work-orders/{fleet['work_order']}", headers=headers).json()
    assert body["verification_status"] is False


def test_finance_cannot_create_vessels(client, finance):
    response = client.post("/api/vessels/", json={"name": "MV Test"}, headers=auth_headers(finance))
    assert response.status_code == 403
