from tests.conftest import PASSWORD, auth_headers


def test_login_and_me(client, master):
    response = client.post("/api/auth/login", data={"username": "master", "password": PASSWORD})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["username"] == "master"
    assert me["role"] == "MASTER"
    assert "view-financial-data" in me["capabilities"]


def test_wrong_password(client, master):
    response = client.post("/api/auth/login", data={"username": "master", "password": "nope"})
    assert response.status_code == 401


def test_capabilities_follow_role(client, operator):
    me = client.get("/api/auth/me", headers=auth_headers(operator)).json()
    assert "view-financial-data" not in me["capabilities"]
    assert "manage-work-progress" in me["capabilities"]


def test_refresh(client, operator):
    response = client.post("/api/auth/refresh", headers=auth_headers(operator))
    assert response.status_code == 200
    assert response.json()["access_token"]


def test_missing_and_invalid_tokens(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_activity_log_restricted(client, master, operator, fleet):
    client.post("/api/vessels/", json={"name": "MV Logged"}, headers=auth_headers(operator))

    assert client.get("/api/activity-log/", headers=auth_headers(operator)).status_code == 403
    response = client.get(
        "/api/activity-log/", params={"table_name": "vessel"}, headers=auth_headers(master)
    )
    assert response.status_code == 200
