from conftest import auth

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_public_document_upload(client, relay):
    response = client.post("/upload", files={"file": ("aadhar.pdf", b"%PDF-1.7 test", "application/pdf")})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["publicId"].startswith("moment/aadhar/")
    assert body["publicId"].endswith(".pdf")
    assert body["url"] == f"https://cdn.test/{body['publicId']}"
    assert relay.objects[body["publicId"]][1] == "application/pdf"


def test_upload_without_file(client):
    response = client.post("/upload")
    assert response.status_code == 400
    assert response.json() == {"error": "No file uploaded"}


def test_disallowed_type(client):
    response = client.post("/upload", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert response.status_code == 400


def test_empty_file(client):
    response = client.post("/upload/single", files={"image": ("a.png", b"", "image/png")}, headers=auth("asha"))
    assert response.status_code == 400
    assert response.json() == {"error": "Uploaded file is empty"}


def test_dangerous_filename(client):
    response = client.post(
        "/upload/single", files={"image": ("bad|name.png", PNG, "image/png")}, headers=auth("asha")
    )
    assert response.status_code == 400


def test_size_limit(client, monkeypatch):
    from moment.domain.uploads import router as upload_router

    monkeypatch.setattr(upload_router, "MAX_UPLOAD_SIZE_MB", 1)
    too_big = b"\x00" * (1024 * 1024 + 1)
    response = client.post("/upload/single", files={"image": ("big.png", too_big, "image/png")}, headers=auth("asha"))
    assert response.status_code == 400
    assert "1MB" in response.json()["error"]


def test_single_upload_goes_to_user_folder(client):
    assert client.post("/upload/single", files={"image": ("a.png", PNG, "image/png")}).status_code == 401

    response = client.post("/upload/single", files={"image": ("a.png", PNG, "image/png")}, headers=auth("asha"))
    assert response.status_code == 200
    assert response.json()["publicId"].startswith("moment/asha/")


def test_multiple_upload(client):
    files = [("images", (f"{n}.jpg", PNG, "image/jpeg")) for n in range(3)]
    response = client.post("/upload/multiple", files=files, headers=auth("ravi", "provider"))
    assert response.status_code == 200
    images = response.json()["images"]
    assert len(images) == 3
    assert all(image["publicId"].startswith("moment/ravi/") for image in images)


def test_multiple_upload_limit(client):
    files = [("images", (f"{n}.jpg", PNG, "image/jpeg")) for n in range(11)]
    response = client.post("/upload/multiple", files=files, headers=auth("ravi", "provider"))
    assert response.status_code == 400


def test_delete_own_upload_only(client, relay):
    public_id = client.post(
        "/upload/single", files={"image": ("a.png", PNG, "image/png")}, headers=auth("asha")
    ).json()["publicId"]

    assert client.delete(f"/upload/{public_id}", headers=auth("meera")).status_code == 403
    response = client.delete(f"/upload/{public_id}", headers=auth("asha"))
    assert response.status_code == 200
    assert relay.deleted == [public_id]


def test_registration_documents_are_admin_deletable(client, relay):
    public_id = client.post(
        "/upload", files={"file": ("aadhar.pdf", b"%PDF-1.7", "application/pdf")}
    ).json()["publicId"]
    assert client.delete(f"/upload/{public_id}", headers=auth("asha")).status_code == 403
    assert client.delete(f"/upload/{public_id}", headers=auth("root", "admin")).status_code == 200


def test_delete_outside_the_app_folder(client):
    response = client.delete("/upload/other-bucket/a.png", headers=auth("root", "admin"))
    assert response.status_code == 400
