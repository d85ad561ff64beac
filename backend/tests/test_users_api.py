from conftest import auth_headers, make_token


def test_me_requires_authorization(client):
    r = client.get("/me")
    assert r.status_code == 401
    assert r.json() == {"error": "Missing Authorization header"}


def test_me_rejects_bad_token(client):
    bad = make_token("someone", secret="wrong-secret")
    r = client.get("/me", headers={"Authorization": f"Bearer {bad}"})
    assert r.status_code == 401
    assert r.json()["error"] == "Authentication failed"
    assert "details" in r.json()


def test_me_rejects_expired_token(client):
    expired = make_token("someone", expires_in=-60)
    r = client.get("/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401


def test_first_request_creates_basic_profile(client):
    r = client.get("/me", headers=auth_headers("new-user", "new@example.com"))
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == "new-user"
    assert body["email"] == "new@example.com"
    assert body["role"] == "basic"
    assert body["is_submitter"] is False
    assert body["is_curator"] is False
    assert body["is_admin"] is False


def test_role_flags_for_curator(client, curator):
    body = client.get("/me", headers=curator).json()
    assert body["role"] == "curator"
    assert body["is_submitter"] is True
    assert body["is_curator"] is True
    assert body["is_admin"] is False


def test_list_users_is_admin_only(client, admin, curator):
    r = client.get("/users", headers=curator)
    assert r.status_code == 403
    assert r.json()["error"] == "Insufficient permissions"

    r = client.get("/users", headers=admin)
    assert r.status_code == 200
    assert {u["id"] for u in r.json()["users"]} == {"admin-1", "curator-1"}


def test_admin_changes_role(client, admin, basic):
    r = client.patch("/users/basic-1/role", json={"role": "submitter"}, headers=admin)
    assert r.status_code == 200
    assert r.json()["role"] == "submitter"
    assert r.json()["is_submitter"] is True

    assert client.get("/me", headers=basic).json()["role"] == "submitter"


def test_admin_cannot_change_own_role(client, admin):
    r = client.patch("/users/admin-1/role", json={"role": "basic"}, headers=admin)
    assert r.status_code == 400
    assert client.get("/me", headers=admin).json()["role"] == "admin"


def test_role_change_validation(client, admin):
    assert client.patch("/users/nobody/role", json={"role": "curator"}, headers=admin).status_code == 404
    assert client.patch("/users/nobody/role", json={"role": "superuser"}, headers=admin).status_code == 422
