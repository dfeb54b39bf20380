import datetime

from tests.conftest import auth_headers


def test_list_with_counts(client, master, fleet):
    body = client.get("/api/invoices/", headers=auth_headers(master)).json()

    assert body["total"] == 1
    assert body["paid"] == 0
    assert body["unpaid"] == 1
    assert float(body["items"][0]["payment_price"]) == 1500000


def test_price_hidden_without_financial_capability(client, operator, fleet):
    response = client.get("/api/invoices/", headers=auth_headers(operator))

    assert response.status_code == 200
    item = response.json()["items"][0]
    assert item["invoice_number"] == "INV-001"
    assert item["payment_price"] is None


def test_second_invoice_for_work_order_conflicts(client, finance, fleet):
    response = client.post(
        "/api/invoices/",
        json={"work_order_id": fleet["work_order"], "invoice_number": "INV-002"},
        headers=auth_headers(finance),
    )
    assert response.status_code == 409


def test_operation_cannot_create_invoice(client, operator, fleet):
    response = client.post(
        "/api/invoices/",
        json={"work_order_id": fleet["work_order"]},
        headers=auth_headers(operator),
    )
    assert response.status_code == 403


def test_mark_paid_and_unpaid(client, finance, fleet):
    headers = auth_headers(finance)
    invoice_id = client.get("/api/invoices/", headers=headers).json()["items"][0]["id"]

    paid = client.post(f"/api/invoices/{invoice_id}/mark-paid", json={}, headers=headers).json()
    assert paid["payment_status"] is True
    assert paid["payment_date"] == datetime.date.today().isoformat()

    body = client.get("/api/invoices/", params={"paid": "true"}, headers=headers).json()
    assert len(body["items"]) == 1
    assert (body["paid"], body["unpaid"]) == (1, 0)

    unpaid = client.post(f"/api/invoices/{invoice_id}/mark-unpaid", headers=headers).json()
    assert unpaid["payment_status"] is False
    assert unpaid["payment_date"] is None


def test_deleted_invoice_frees_work_order(client, finance, fleet):
    headers = auth_headers(finance)
    invoice_id = client.get("/api/invoices/", headers=headers).json()["items"][0]["id"]
    assert client.delete(f"/api/invoices/{invoice_id}", headers=headers).status_code == 200

    response = client.post(
        "/api/invoices/",
        json={"work_order_id": fleet["work_order"], "payment_price": "2500000.00"},
        headers=headers,
    )
    assert response.status_code == 201
    assert client.get("/api/invoices/", headers=headers).json()["total"] == 1
