import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import Unauthenticated, UpstreamFailure

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, derived from a verified Firebase ID token."""

    subject_id: str
    is_admin: bool = False
    is_provider: bool = False
    email: Optional[str] = None

    @property
    def role(self) -> str:
        if self.is_admin:
            return "admin"
        if self.is_provider:
            return "provider"
        return "user"


def principal_from_claims(decoded_token: dict) -> Principal:
    # firebase_admin exposes the subject as `uid`; raw JWTs carry `sub`
    subject_id = decoded_token.get("uid") or decoded_token.get("sub") or decoded_token.get("user_id")
    if not subject_id:
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(decoded_token.keys())}")
        raise Unauthenticated("Unauthorized - Invalid token")
    return Principal(
        subject_id=subject_id,
        is_admin=decoded_token.get("admin") is True,
        is_provider=decoded_token.get("provider") is True,
        email=decoded_token.get("email"),
    )


class TokenVerifier:
    def verify(self, token: str) -> Principal:
        raise NotImplementedError


class FirebaseTokenVerifier(TokenVerifier):
    """Verifies Firebase ID tokens with the Admin SDK (signature, audience, expiry)."""

    def verify(self, token: str) -> Principal:
        from firebase_admin import auth as firebase_auth

        from .firebase import get_firebase_app

        try:
            decoded_token = firebase_auth.verify_id_token(token, app=get_firebase_app())
        except firebase_auth.ExpiredIdTokenError as e:
            logger.info("ℹ️ Expired ID token presented")
            raise Unauthenticated(
                "Token has expired. Please refresh your session.",
                headers={"X-Token-Expired": "true"},
            ) from e
        except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.CertificateFetchError) as e:
            logger.warning(f"⚠️ Token verification failed: {type(e).__name__}")
            raise Unauthenticated("Unauthorized - Invalid token") from e
        return principal_from_claims(decoded_token)


class IdentityAdmin:
    """Writes role claims back to the identity provider."""

    def set_role_claims(self, uid: str, role: str) -> None:
        raise NotImplementedError


class FirebaseIdentityAdmin(IdentityAdmin):
    def set_role_claims(self, uid: str, role: str) -> None:
        import firebase_admin
        from firebase_admin import auth as firebase_auth

        from .firebase import get_firebase_app

        claims = {"admin": True} if role == "admin" else {"provider": True} if role == "provider" else None
        try:
            firebase_auth.set_custom_user_claims(uid, claims, app=get_firebase_app())
        except firebase_admin.exceptions.FirebaseError as e:
            logger.error(f"❌ Failed to set custom claims for {uid}: {e}")
            raise UpstreamFailure("Failed to update user claims") from e
        logger.info(f"✅ Custom claims for {uid} set to role '{role}'")


def get_token_verifier() -> TokenVerifier:
    return FirebaseTokenVerifier()


def get_identity_admin() -> IdentityAdmin:
    return FirebaseIdentityAdmin()


async def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Optional[Principal]:
    """Principal when a bearer token was sent, None otherwise. Bad tokens still fail."""
    if not credentials:
        return None
    token = credentials.credentials
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, length: {len(token)}")
        raise Unauthenticated("Unauthorized - Invalid token")
    return verifier.verify(token)


async def get_current_principal(
    principal: Optional[Principal] = Depends(get_optional_principal),
) -> Principal:
    if principal is None:
        raise Unauthenticated("Unauthorized - No token provided")
    return principal
