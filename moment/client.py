"""Python client for the Moment API.

    client = MomentClient("https://api.moment.events", token_provider=get_id_token)
    providers = client.providers.list(published=True)
    booking = client.bookings.create({"providerId": providers[0]["id"], "date": "2025-06-01"})

Responses are unwrapped from their {"success": true, "<entity>": ...}
envelope. Any non-2xx response raises MomentAPIError.
"""

import logging
import os
from typing import Any, Callable, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = os.getenv("MOMENT_API_URL", "http://localhost:5000")

FileTuple = tuple  # (filename, bytes, content_type)


class MomentAPIError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class MomentClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        self.token = token
        self.token_provider = token_provider
        self.http = http or httpx.Client(base_url=base_url or DEFAULT_BASE_URL, timeout=timeout)

        self.auth = AuthAPI(self)
        self.users = UsersAPI(self)
        self.providers = ProvidersAPI(self)
        self.services = ServicesAPI(self)
        self.bookings = BookingsAPI(self)
        self.uploads = UploadsAPI(self)

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _headers(self) -> dict[str, str]:
        token = self.token_provider() if self.token_provider else self.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
        files: Any = None,
    ) -> dict[str, Any]:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = self.http.request(
                method, path, json=json, params=params or None, files=files, headers=self._headers()
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {path} failed: {e}")
            raise MomentAPIError(0, f"Request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = body.get("error") if isinstance(body, dict) else None
            raise MomentAPIError(response.status_code, message or response.text or response.reason_phrase)
        return body


class _ResourceAPI:
    def __init__(self, client: MomentClient):
        self._client = client

    def _call(self, method: str, path: str, key: Optional[str] = None, **kwargs) -> Any:
        body = self._client.request(method, path, **kwargs)
        return body.get(key) if key else body


class AuthAPI(_ResourceAPI):
    def register(
        self,
        uid: str,
        email: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        role: str = "user",
        **extra: Any,
    ) -> dict:
        payload = {"uid": uid, "email": email, "name": name, "phone": phone, "role": role, **extra}
        return self._call("POST", "/auth/register", "user", json=payload)

    def set_admin(self, uid: str, admin_secret: str) -> dict:
        return self._call("POST", f"/auth/set-admin/{uid}", json={"adminSecret": admin_secret})

    def set_claims(self, uid: str, claims: dict[str, bool]) -> dict:
        return self._call("POST", f"/auth/set-claims/{uid}", json={"claims": claims})


class UsersAPI(_ResourceAPI):
    def list(self) -> List[dict]:
        return self._call("GET", "/users", "users")

    def get(self, uid: str) -> dict:
        return self._call("GET", f"/users/{uid}", "user")

    def me(self) -> dict:
        return self._call("GET", "/users/me", "user")

    def provision(self) -> dict:
        return self._call("POST", "/users/me", "user")

    def update(self, uid: str, data: dict) -> dict:
        return self._call("PUT", f"/users/{uid}", "user", json=data)

    def delete(self, uid: str) -> None:
        self._call("DELETE", f"/users/{uid}")


class ProvidersAPI(_ResourceAPI):
    def list(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
        published: Optional[bool] = None,
    ) -> List[dict]:
        params = {"status": status, "category": category, "published": published}
        return self._call("GET", "/providers", "providers", params=params)

    def get(self, provider_id: str) -> dict:
        return self._call("GET", f"/providers/{provider_id}", "provider")

    def get_by_uid(self, uid: str) -> dict:
        return self._call("GET", f"/providers/user/{uid}", "provider")

    def create(self, data: dict) -> dict:
        return self._call("POST", "/providers", "provider", json=data)

    def update(self, provider_id: str, data: dict) -> dict:
        return self._call("PUT", f"/providers/{provider_id}", "provider", json=data)

    def update_status(self, provider_id: str, status: str) -> dict:
        return self._call("PATCH", f"/providers/{provider_id}/status", "provider", json={"status": status})

    def set_published(self, provider_id: str, published: bool) -> dict:
        return self._call(
            "PATCH", f"/providers/{provider_id}/publish", "provider", json={"published": published}
        )

    def delete(self, provider_id: str) -> None:
        self._call("DELETE", f"/providers/{provider_id}")


class ServicesAPI(_ResourceAPI):
    def list(self, category: Optional[str] = None, available: Optional[bool] = None) -> List[dict]:
        return self._call("GET", "/services", "services", params={"category": category, "available": available})

    def get(self, service_id: str) -> dict:
        return self._call("GET", f"/services/{service_id}", "service")

    def list_by_provider(self, provider_id: str) -> List[dict]:
        return self._call("GET", f"/services/provider/{provider_id}", "services")

    def create(self, data: dict) -> dict:
        return self._call("POST", "/services", "service", json=data)

    def update(self, service_id: str, data: dict) -> dict:
        return self._call("PUT", f"/services/{service_id}", "service", json=data)

    def delete(self, service_id: str) -> None:
        self._call("DELETE", f"/services/{service_id}")


class BookingsAPI(_ResourceAPI):
    def list(self) -> List[dict]:
        return self._call("GET", "/bookings", "bookings")

    def get(self, booking_id: str) -> dict:
        return self._call("GET", f"/bookings/{booking_id}", "booking")

    def list_by_user(self, user_id: str) -> List[dict]:
        return self._call("GET", f"/bookings/user/{user_id}", "bookings")

    def list_by_provider(self, provider_id: str) -> List[dict]:
        return self._call("GET", f"/bookings/provider/{provider_id}", "bookings")

    def booked_dates(self, provider_id: str) -> List[str]:
        return self._call("GET", f"/bookings/provider/{provider_id}/dates", "dates")

    def create(self, data: dict) -> dict:
        return self._call("POST", "/bookings", "booking", json=data)

    def update(self, booking_id: str, data: dict) -> dict:
        return self._call("PUT", f"/bookings/{booking_id}", "booking", json=data)

    def update_status(self, booking_id: str, status: str) -> dict:
        return self._call("PATCH", f"/bookings/{booking_id}/status", "booking", json={"status": status})

    def delete(self, booking_id: str) -> None:
        self._call("DELETE", f"/bookings/{booking_id}")


class UploadsAPI(_ResourceAPI):
    """Files are (filename, bytes, content_type) tuples."""

    def upload_document(self, file: FileTuple) -> dict:
        body = self._call("POST", "/upload", files={"file": file})
        return {"url": body.get("url"), "publicId": body.get("publicId")}

    def upload_single(self, image: FileTuple) -> dict:
        body = self._call("POST", "/upload/single", files={"image": image})
        return {"url": body.get("url"), "publicId": body.get("publicId")}

    def upload_multiple(self, images: List[FileTuple]) -> List[dict]:
        return self._call("POST", "/upload/multiple", "images", files=[("images", image) for image in images])

    def delete(self, public_id: str) -> None:
        self._call("DELETE", f"/upload/{public_id}")
