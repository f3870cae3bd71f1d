"""Account service - registration, provisioning and role claims.

The User document's `role` is the source of truth. Firebase custom claims
are rewritten from it after every role change.
"""

import hmac
import logging
from typing import Any, Optional

from ...auth import IdentityAdmin, Principal
from ...config import ADMIN_SECRET
from ...errors import Conflict, Forbidden, ValidationError
from ..providers.service import ProviderService
from ..users.service import ROLES, UserService

logger = logging.getLogger(__name__)

# Registration-time fields copied onto the auto-created provider profile
PROVIDER_REGISTRATION_FIELDS = ("experience", "address", "aadharUrl")


def role_from_claims(claims: dict[str, Any]) -> str:
    if claims.get("admin"):
        return "admin"
    if claims.get("provider"):
        return "provider"
    return "user"


class AccountService:
    def __init__(
        self,
        users: UserService,
        providers: ProviderService,
        identity: IdentityAdmin,
        admin_secret: Optional[str] = ADMIN_SECRET,
    ):
        self.users = users
        self.providers = providers
        self.identity = identity
        self.admin_secret = admin_secret

    def register(self, data: dict[str, Any]) -> dict:
        """Idempotent registration.

        Creates the User if missing (an existing profile is returned as-is)
        and, for providers, makes sure exactly one pending Provider profile
        exists. Claims are refreshed from the stored role.
        """
        uid = data["uid"]
        role = data.get("role") or "user"
        if role == "admin":
            raise ValidationError("Admin role cannot be requested at registration")

        user = self._ensure_user(
            uid,
            {
                "email": data.get("email"),
                "name": data.get("name"),
                "phone": data.get("phone"),
                "role": role,
            },
        )
        if user["role"] == "provider":
            self._ensure_provider_profile(uid, data)
        self.identity.set_role_claims(uid, user["role"])
        return user

    def provision(self, principal: Principal) -> dict:
        """Return the caller's profile, creating it from the token on first use"""
        user = self.users.get_by_id(principal.subject_id)
        if user is not None:
            return user
        logger.info(f"👤 Provisioning profile for {principal.subject_id}")
        email = principal.email or ""
        return self._ensure_user(
            principal.subject_id,
            {"email": principal.email, "name": email.split("@")[0] or "User", "role": principal.role},
        )

    def set_admin(self, uid: str, secret: Optional[str]) -> dict:
        if not self.admin_secret or not secret or not hmac.compare_digest(secret, self.admin_secret):
            logger.warning(f"🚫 Invalid admin secret presented for {uid}")
            raise Forbidden("Invalid admin secret")
        return self.change_role(uid, "admin")

    def set_claims(self, uid: str, claims: dict[str, Any]) -> dict:
        return self.change_role(uid, role_from_claims(claims))

    def change_role(self, uid: str, role: str) -> dict:
        if role not in ROLES:
            raise ValidationError(f"Invalid role '{role}'")
        user = self.users.update(uid, {"role": role})
        self.identity.set_role_claims(uid, role)
        logger.info(f"🔑 Role of {uid} set to '{role}'")
        return user

    def _ensure_user(self, uid: str, data: dict[str, Any]) -> dict:
        existing = self.users.get_by_id(uid)
        if existing is not None:
            return existing
        try:
            return self.users.create_user(uid, data)
        except Conflict:
            # Concurrent first request created it
            return self.users.get_or_404(uid)

    def _ensure_provider_profile(self, uid: str, data: dict[str, Any]) -> dict:
        existing = self.providers.find_by_uid(uid)
        if existing is not None:
            return existing
        profile = {
            "uid": uid,
            "email": data.get("email"),
            "businessName": data.get("name") or "New Provider",
            "category": "other",
            "phone": data.get("phone") or "",
            "description": "Waiting for admin approval",
        }
        for field in PROVIDER_REGISTRATION_FIELDS:
            profile[field] = data.get(field) or ""
        try:
            return self.providers.create(profile)
        except Conflict:
            return self.providers.find_by_uid(uid)
