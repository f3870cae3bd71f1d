from conftest import ADMIN_SECRET, auth


def register(client, uid, role="user", headers=None, **extra):
    body = {"uid": uid, "email": f"{uid}@example.com", "name": uid.title(), "role": role, **extra}
    return client.post("/auth/register", json=body, headers=headers)


def test_register_user(client, identity):
    response = register(client, "asha")
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["user"]["id"] == "asha"
    assert body["user"]["role"] == "user"
    assert identity.roles["asha"] == "user"


def test_register_is_idempotent(client):
    first = register(client, "asha").json()["user"]
    second = register(client, "asha", name="Changed", headers=auth("asha")).json()["user"]
    assert second == first


def test_register_existing_uid_does_not_expose_profile(client):
    register(client, "asha", phone="+91-999")

    anonymous = register(client, "asha", email="x@example.com")
    assert anonymous.status_code == 201
    assert anonymous.json()["user"] == {"id": "asha"}

    stranger = register(client, "asha", headers=auth("meera"))
    assert stranger.json()["user"] == {"id": "asha"}

    admin = register(client, "asha", headers=auth("root", "admin"))
    assert admin.json()["user"]["phone"] == "+91-999"

    owner = client.get("/users/asha", headers=auth("asha")).json()["user"]
    assert owner["email"] == "asha@example.com"


def test_register_provider_creates_pending_profile(client):
    register(client, "ravi", role="provider", experience="5 years", aadharUrl="https://cdn.test/doc.pdf")
    register(client, "ravi", role="provider")

    response = client.get("/providers/user/ravi", headers=auth("ravi", "provider"))
    assert response.status_code == 200
    provider = response.json()["provider"]
    assert provider["status"] == "pending"
    assert provider["published"] is False
    assert provider["experience"] == "5 years"
    assert provider["aadharUrl"] == "https://cdn.test/doc.pdf"
    assert len(client.get("/providers").json()["providers"]) == 1


def test_register_cannot_request_admin(client):
    response = register(client, "mallory", role="admin")
    assert response.status_code == 400
    assert "error" in response.json()


def test_register_requires_uid_and_email(client):
    response = client.post("/auth/register", json={"name": "Nobody"})
    assert response.status_code == 400
    assert response.json()["error"].startswith("uid")


def test_set_admin_with_secret(client, identity):
    register(client, "asha")
    response = client.post("/auth/set-admin/asha", json={"adminSecret": ADMIN_SECRET})
    assert response.status_code == 200
    assert identity.roles["asha"] == "admin"
    user = client.get("/users/asha", headers=auth("asha", "admin")).json()["user"]
    assert user["role"] == "admin"


def test_set_admin_rejects_bad_secret(client, identity):
    register(client, "asha")
    response = client.post("/auth/set-admin/asha", json={"adminSecret": "guess"})
    assert response.status_code == 403
    assert response.json() == {"error": "Invalid admin secret"}
    assert identity.roles["asha"] == "user"


def test_set_claims_is_admin_only(client, identity):
    register(client, "asha")
    denied = client.post("/auth/set-claims/asha", json={"claims": {"provider": True}}, headers=auth("asha"))
    assert denied.status_code == 403

    allowed = client.post(
        "/auth/set-claims/asha", json={"claims": {"provider": True}}, headers=auth("root", "admin")
    )
    assert allowed.status_code == 200
    assert identity.roles["asha"] == "provider"


def test_set_claims_for_unknown_user(client):
    response = client.post(
        "/auth/set-claims/ghost", json={"claims": {"admin": True}}, headers=auth("root", "admin")
    )
    assert response.status_code == 404
