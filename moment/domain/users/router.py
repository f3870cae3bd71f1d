"""User router - profile endpoints"""

import logging

from fastapi import APIRouter, Depends

from ...auth import Principal, get_current_principal
from ...policy import Action, authorize
from ...store import DocumentStore, get_store
from ..accounts.router import get_account_service
from ..accounts.service import AccountService
from .schemas import UserUpdate
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(store: DocumentStore = Depends(get_store)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(store)


@router.get("")
def get_users(
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
):
    """List all users (admin only)"""
    authorize(principal, Action.USER_LIST)
    return {"success": True, "users": service.get_all()}


@router.get("/me")
def get_me(
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
):
    return {"success": True, "user": service.get_or_404(principal.subject_id)}


@router.post("/me")
def provision_me(
    principal: Principal = Depends(get_current_principal),
    accounts: AccountService = Depends(get_account_service),
):
    """Create the caller's profile from the token claims if it is missing (idempotent)"""
    return {"success": True, "user": accounts.provision(principal)}


@router.get("/{uid}")
def get_user(
    uid: str,
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
):
    authorize(principal, Action.USER_READ, {"id": uid})
    return {"success": True, "user": service.get_or_404(uid)}


@router.put("/{uid}")
def update_user(
    uid: str,
    data: UserUpdate,
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
    accounts: AccountService = Depends(get_account_service),
):
    authorize(principal, Action.USER_UPDATE, {"id": uid})
    user = service.get_or_404(uid)

    updates = data.model_dump(exclude_unset=True)
    # The document key is the Firebase uid
    updates.pop("uid", None)
    role = updates.pop("role", None)
    if role is not None and role != user.get("role"):
        authorize(principal, Action.USER_CHANGE_ROLE, user)
        accounts.change_role(uid, role)

    user = service.update(uid, updates)
    return {"success": True, "user": user}


@router.delete("/{uid}")
def delete_user(
    uid: str,
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
):
    """Delete a user profile (admin only)"""
    authorize(principal, Action.USER_DELETE, {"id": uid})
    service.delete(uid)
    return {"success": True, "message": "User deleted successfully"}
