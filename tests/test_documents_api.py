import pytest

from marine_ops.config import get_settings
from tests.conftest import auth_headers


@pytest.fixture(autouse=True)
def storage(tmp_path, monkeypatch):
    monkeypatch.setattr(get_settings(), "STORAGE_DIR", tmp_path)
    return tmp_path


def test_permit_upload_and_signed_download(client, operator, fleet):
    headers = auth_headers(operator)
    response = client.post(
        f"/api/documents/work-details/{fleet['hull']}/permit",
        files={"file": ("hot work permit.pdf", b"%PDF-1.4 permit", "application/pdf")},
        headers=headers,
    )
    assert response.status_code == 201
    uploaded = response.json()
    assert uploaded["url"] == f"/api/documents/work-details/{fleet['hull']}/permit"
    assert uploaded["storage_path"].startswith("work_permit/")
    assert uploaded["storage_path"].endswith("_hot_work_permit.pdf")

    signed = client.get(uploaded["url"], params={"mode": "download"}, headers=headers).json()
    assert signed["expires_in"] == 300
    assert signed["url"].startswith("/api/documents/file?token=")

    document = client.get(signed["url"])
    assert document.status_code == 200
    assert document.content == b"%PDF-1.4 permit"


def test_view_mode_lifetime(client, operator, fleet):
    headers = auth_headers(operator)
    client.post(
        f"/api/documents/work-details/{fleet['hull']}/permit",
        files={"file": ("permit.pdf", b"data", "application/pdf")},
        headers=headers,
    )
    signed = client.get(
        f"/api/documents/work-details/{fleet['hull']}/permit",
        params={"mode": "view"},
        headers=headers,
    ).json()
    assert signed["expires_in"] == 1800


def test_evidence_upload(client, operator, fleet):
    headers = auth_headers(operator)
    progress_id = client.get(
        "/api/work-progress/", params={"work_details_id": fleet["hull"]}, headers=headers
    ).json()[0]["id"]

    response = client.post(
        f"/api/documents/work-progress/{progress_id}/evidence",
        files={"file": ("photo.jpg", b"\xff\xd8\xff", "image/jpeg")},
        headers=headers,
    )
    assert response.status_code == 201

    signed = client.get(f"/api/documents/work-progress/{progress_id}/evidence", headers=headers).json()
    assert signed["expires_in"] == get_settings().SIGNED_URL_EXPIRATION_SECONDS


def test_no_document_stored(client, operator, fleet):
    response = client.get(
        f"/api/documents/work-details/{fleet['paint']}/permit", headers=auth_headers(operator)
    )
    assert response.status_code == 404


def test_invalid_link_rejected(client, operator):
    assert client.get("/api/documents/file", params={"token": "junk"}).status_code == 403

    # An access token is not a document link
    token = auth_headers(operator)["Authorization"].split()[1]
    assert client.get("/api/documents/file", params={"token": token}).status_code == 403
