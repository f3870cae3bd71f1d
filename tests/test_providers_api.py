from conftest import auth


def test_create_provider_forces_owner_and_defaults(client):
    response = client.post(
        "/providers",
        json={"businessName": "Shutter", "category": "photography", "uid": "someone-else", "rating": 5},
        headers=auth("ravi", "provider"),
    )
    assert response.status_code == 201
    provider = response.json()["provider"]
    assert provider["uid"] == "ravi"
    assert provider["status"] == "pending"
    assert provider["published"] is False
    assert provider["rating"] == 0


def test_create_provider_without_category_defaults_to_other(client):
    response = client.post("/providers", json={"businessName": "X"}, headers=auth("ravi", "provider"))
    assert response.status_code == 201
    provider = response.json()["provider"]
    assert provider["category"] == "other"

    listed = client.get("/providers", params={"category": "other"}).json()["providers"]
    assert [p["id"] for p in listed] == [provider["id"]]


def test_one_provider_per_user(client, make_provider):
    make_provider("ravi")
    response = client.post("/providers", json={"businessName": "Again"}, headers=auth("ravi", "provider"))
    assert response.status_code == 409
    assert response.json() == {"error": "Provider already exists"}


def test_create_requires_token(client):
    assert client.post("/providers", json={"businessName": "Anon"}).status_code == 401


def test_public_reads(client, make_provider):
    provider = make_provider("ravi")
    assert client.get("/providers").status_code == 200
    response = client.get(f"/providers/{provider['id']}")
    assert response.status_code == 200
    assert response.json()["provider"]["businessName"] == "ravi Events"


def test_get_missing_provider(client):
    response = client.get("/providers/missing")
    assert response.status_code == 404
    assert response.json() == {"error": "Provider not found"}


def test_get_by_uid_requires_token(client, make_provider):
    make_provider("ravi")
    assert client.get("/providers/user/ravi").status_code == 401
    assert client.get("/providers/user/ravi", headers=auth("asha")).status_code == 200
    assert client.get("/providers/user/nobody", headers=auth("asha")).status_code == 404


def test_list_filters(client, make_provider):
    first = make_provider("ravi", category="catering")
    make_provider("meera", category="decor")
    client.patch(f"/providers/{first['id']}/publish", json={"published": True}, headers=auth("ravi", "provider"))

    def ids(**params):
        return [p["id"] for p in client.get("/providers", params=params).json()["providers"]]

    assert ids(category="catering") == [first["id"]]
    assert ids(published="true") == [first["id"]]
    assert len(ids(published="false")) == 1
    assert len(ids(status="pending")) == 2
    assert ids(status="approved") == []


def test_owner_updates_profile(client, make_provider):
    provider = make_provider("ravi")
    response = client.put(
        f"/providers/{provider['id']}",
        json={"description": "Candid wedding photography", "features": ["drone"]},
        headers=auth("ravi", "provider"),
    )
    assert response.status_code == 200
    assert response.json()["provider"]["features"] == ["drone"]

    other = client.put(f"/providers/{provider['id']}", json={"description": "x"}, headers=auth("meera", "provider"))
    assert other.status_code == 403


def test_owner_cannot_approve_self(client, make_provider):
    provider = make_provider("ravi")
    via_put = client.put(f"/providers/{provider['id']}", json={"status": "approved"}, headers=auth("ravi", "provider"))
    assert via_put.status_code == 403
    via_patch = client.patch(
        f"/providers/{provider['id']}/status", json={"status": "approved"}, headers=auth("ravi", "provider")
    )
    assert via_patch.status_code == 403


def test_admin_sets_status(client, make_provider):
    provider = make_provider("ravi")
    url = f"/providers/{provider['id']}/status"
    approved = client.patch(url, json={"status": "approved"}, headers=auth("root", "admin"))
    assert approved.status_code == 200
    assert approved.json()["provider"]["status"] == "approved"

    back_to_pending = client.patch(url, json={"status": "pending"}, headers=auth("root", "admin"))
    assert back_to_pending.status_code == 400
    invalid = client.patch(url, json={"status": "bogus"}, headers=auth("root", "admin"))
    assert invalid.status_code == 400


def test_status_of_missing_provider(client):
    response = client.patch("/providers/missing/status", json={"status": "approved"}, headers=auth("root", "admin"))
    assert response.status_code == 404


def test_publish_is_owner_only(client, make_provider):
    provider = make_provider("ravi")
    url = f"/providers/{provider['id']}/publish"
    assert client.patch(url, json={"published": True}, headers=auth("root", "admin")).status_code == 403
    response = client.patch(url, json={"published": True}, headers=auth("ravi", "provider"))
    assert response.status_code == 200
    assert response.json()["provider"]["published"] is True


def test_uid_can_be_changed_but_not_to_a_taken_one(client, make_provider):
    provider = make_provider("ravi")
    make_provider("meera")

    taken = client.put(f"/providers/{provider['id']}", json={"uid": "meera"}, headers=auth("ravi", "provider"))
    assert taken.status_code == 409

    moved = client.put(f"/providers/{provider['id']}", json={"uid": "kiran"}, headers=auth("ravi", "provider"))
    assert moved.status_code == 200
    assert moved.json()["provider"]["uid"] == "kiran"


def test_delete_cascades_to_services(client, make_provider):
    provider = make_provider("ravi")
    for name in ("Portraits", "Weddings"):
        client.post(
            "/services", json={"providerId": provider["id"], "name": name}, headers=auth("ravi", "provider")
        )
    assert len(client.get(f"/services/provider/{provider['id']}").json()["services"]) == 2

    assert client.delete(f"/providers/{provider['id']}", headers=auth("meera", "provider")).status_code == 403
    assert client.delete(f"/providers/{provider['id']}", headers=auth("ravi", "provider")).status_code == 200

    assert client.get(f"/providers/{provider['id']}").status_code == 404
    assert client.get(f"/services/provider/{provider['id']}").json()["services"] == []
