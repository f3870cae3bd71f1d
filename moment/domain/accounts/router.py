"""Account router - registration and role claims"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from ...auth import IdentityAdmin, Principal, get_current_principal, get_identity_admin, get_optional_principal
from ...policy import Action, authorize, is_allowed
from ...store import DocumentStore, get_store
from ..providers.service import ProviderService
from ..users.service import UserService
from .schemas import RegisterRequest, SetAdminRequest, SetClaimsRequest
from .service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_account_service(
    store: DocumentStore = Depends(get_store),
    identity: IdentityAdmin = Depends(get_identity_admin),
) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(UserService(store), ProviderService(store), identity)


@router.post("/register", status_code=201)
def register(
    data: RegisterRequest,
    principal: Optional[Principal] = Depends(get_optional_principal),
    service: AccountService = Depends(get_account_service),
):
    """Create a user profile (and a pending provider profile for role=provider).

    Registering an existing uid succeeds without changes. The stored profile
    is only returned to its owner or an admin; anyone else gets the id.
    """
    already_registered = service.users.get_by_id(data.uid) is not None
    user = service.register(data.model_dump())
    if already_registered and not is_allowed(principal, Action.USER_READ, {"id": user["id"]}):
        return {"success": True, "user": {"id": user["id"]}}
    return {"success": True, "user": user}


@router.post("/set-admin/{uid}")
def set_admin(uid: str, data: SetAdminRequest, service: AccountService = Depends(get_account_service)):
    """Initial admin bootstrap, gated by ADMIN_SECRET"""
    service.set_admin(uid, data.adminSecret)
    return {"success": True, "message": "Admin claim set successfully"}


@router.post("/set-claims/{uid}")
def set_claims(
    uid: str,
    data: SetClaimsRequest,
    principal: Principal = Depends(get_current_principal),
    service: AccountService = Depends(get_account_service),
):
    authorize(principal, Action.CLAIMS_SET)
    service.set_claims(uid, data.claims)
    return {"success": True, "message": "Claims updated successfully"}
