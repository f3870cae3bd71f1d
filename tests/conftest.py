import os

# Configure before anything imports moment.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORE_BACKEND"] = "sql"
os.environ["ENFORCE_STATUS_TRANSITIONS"] = "true"
os.environ["ADMIN_SECRET"] = "test-admin-secret"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from moment.auth import (  # noqa: E402
    IdentityAdmin,
    TokenVerifier,
    get_identity_admin,
    get_token_verifier,
    principal_from_claims,
)
from moment.database import Base, SessionLocal, engine  # noqa: E402
from moment.errors import Unauthenticated  # noqa: E402
from moment.main import app  # noqa: E402
from moment.storage import UploadRelay, get_upload_relay  # noqa: E402
from moment.store import SqlDocumentStore  # noqa: E402

ADMIN_SECRET = "test-admin-secret"


def token_for(uid: str, role: str = "user") -> str:
    """Three-segment stand-in for a Firebase ID token"""
    return f"test.{uid}.{role}"


def auth(uid: str, role: str = "user") -> dict:
    return {"Authorization": f"Bearer {token_for(uid, role)}"}


class FakeTokenVerifier(TokenVerifier):
    def verify(self, token):
        _, uid, role = token.split(".")
        if uid == "expired":
            raise Unauthenticated(
                "Token has expired. Please refresh your session.",
                headers={"X-Token-Expired": "true"},
            )
        if role not in ("user", "provider", "admin"):
            raise Unauthenticated("Unauthorized - Invalid token")
        return principal_from_claims(
            {
                "uid": uid,
                "email": f"{uid}@example.com",
                "admin": role == "admin",
                "provider": role == "provider",
            }
        )


class RecordingIdentityAdmin(IdentityAdmin):
    def __init__(self):
        self.roles = {}

    def set_role_claims(self, uid, role):
        self.roles[uid] = role


class FakeUploadRelay(UploadRelay):
    def __init__(self):
        self.objects = {}
        self.deleted = []

    def upload(self, data, folder, filename, content_type):
        ext = os.path.splitext(filename or "")[1].lower()
        key = f"{folder}/file{len(self.objects) + 1}{ext}"
        self.objects[key] = (data, content_type)
        return {"url": f"https://cdn.test/{key}", "publicId": key}

    def delete(self, public_id):
        self.objects.pop(public_id, None)
        self.deleted.append(public_id)


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return SqlDocumentStore(db)


@pytest.fixture
def identity():
    return RecordingIdentityAdmin()


@pytest.fixture
def relay():
    return FakeUploadRelay()


@pytest.fixture
def client(identity, relay):
    app.dependency_overrides[get_token_verifier] = FakeTokenVerifier
    app.dependency_overrides[get_identity_admin] = lambda: identity
    app.dependency_overrides[get_upload_relay] = lambda: relay
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_provider(client):
    """Create a provider profile owned by uid and return it"""

    def _make(uid: str, **fields):
        body = {"businessName": f"{uid} Events", "category": "photography", **fields}
        response = client.post("/providers", json=body, headers=auth(uid, "provider"))
        assert response.status_code == 201, response.text
        return response.json()["provider"]

    return _make
