"""User service - profile documents keyed by Firebase uid"""

from typing import Any

from ...collections import COLLECTION_USERS
from ..base import ResourceService

ROLES = ("user", "provider", "admin")


class UserService(ResourceService):
    collection = COLLECTION_USERS
    name = "User"

    def apply_defaults(self, data: dict[str, Any]) -> dict[str, Any]:
        return {
            **data,
            "email": data.get("email"),
            "name": data.get("name") or "",
            "phone": data.get("phone") or "",
            "avatar": data.get("avatar") or "",
            "role": data.get("role") or "user",
        }

    def create_user(self, uid: str, data: dict[str, Any]) -> dict:
        """Create the profile for uid; Conflict if one already exists"""
        return self.create({**data, "uid": uid}, doc_id=uid, overwrite=False)

    def get_all(self) -> list[dict]:
        return self.list()
