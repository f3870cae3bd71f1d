"""Provider router - FastAPI endpoints for provider profiles"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...auth import Principal, get_current_principal, get_optional_principal
from ...errors import NotFound
from ...policy import Action, authorize
from ...store import DocumentStore, get_store
from .schemas import ProviderCreate, ProviderPublishUpdate, ProviderStatusUpdate, ProviderUpdate
from .service import ProviderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/providers", tags=["Providers"])


def get_provider_service(store: DocumentStore = Depends(get_store)) -> ProviderService:
    """Dependency injection for ProviderService"""
    return ProviderService(store)


@router.get("")
def get_providers(
    status: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    published: Optional[bool] = Query(None),
    principal: Optional[Principal] = Depends(get_optional_principal),
    service: ProviderService = Depends(get_provider_service),
):
    """List providers, optionally filtered by status, category and published"""
    authorize(principal, Action.PROVIDER_READ)
    providers = service.get_all(status=status, category=category, published=published)
    return {"success": True, "providers": providers}


@router.get("/user/{uid}")
def get_provider_by_uid(
    uid: str,
    principal: Principal = Depends(get_current_principal),
    service: ProviderService = Depends(get_provider_service),
):
    """Get the provider profile owned by a user"""
    authorize(principal, Action.PROVIDER_READ)
    provider = service.find_by_uid(uid)
    if provider is None:
        raise NotFound("Provider not found")
    return {"success": True, "provider": provider}


@router.get("/{provider_id}")
def get_provider(
    provider_id: str,
    principal: Optional[Principal] = Depends(get_optional_principal),
    service: ProviderService = Depends(get_provider_service),
):
    authorize(principal, Action.PROVIDER_READ)
    return {"success": True, "provider": service.get_or_404(provider_id)}


@router.post("", status_code=201)
def create_provider(
    data: ProviderCreate,
    principal: Principal = Depends(get_current_principal),
    service: ProviderService = Depends(get_provider_service),
):
    """Create the caller's provider profile (one per user)"""
    authorize(principal, Action.PROVIDER_CREATE)
    provider = service.create({**data.model_dump(exclude_unset=True), "uid": principal.subject_id})
    return {"success": True, "provider": provider}


@router.put("/{provider_id}")
def update_provider(
    provider_id: str,
    data: ProviderUpdate,
    principal: Principal = Depends(get_current_principal),
    service: ProviderService = Depends(get_provider_service),
):
    provider = service.get_or_404(provider_id)
    authorize(principal, Action.PROVIDER_UPDATE, provider)

    updates = data.model_dump(exclude_unset=True)
    if "status" in updates and updates["status"] != provider.get("status"):
        authorize(principal, Action.PROVIDER_SET_STATUS, provider)
    if "published" in updates and updates["published"] != provider.get("published"):
        authorize(principal, Action.PROVIDER_PUBLISH, provider)

    return {"success": True, "provider": service.update(provider_id, updates)}


@router.patch("/{provider_id}/status")
def update_provider_status(
    provider_id: str,
    data: ProviderStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    service: ProviderService = Depends(get_provider_service),
):
    """Approve or reject a provider (admin only)"""
    authorize(principal, Action.PROVIDER_SET_STATUS, {"id": provider_id})
    return {"success": True, "provider": service.update_status(provider_id, data.status)}


@router.patch("/{provider_id}/publish")
def toggle_provider_published(
    provider_id: str,
    data: ProviderPublishUpdate,
    principal: Principal = Depends(get_current_principal),
    service: ProviderService = Depends(get_provider_service),
):
    """Show or hide the provider's profile (owner only)"""
    provider = service.get_or_404(provider_id)
    authorize(principal, Action.PROVIDER_PUBLISH, provider)
    return {"success": True, "provider": service.set_published(provider_id, data.published)}


@router.delete("/{provider_id}")
def delete_provider(
    provider_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ProviderService = Depends(get_provider_service),
):
    provider = service.get_or_404(provider_id)
    authorize(principal, Action.PROVIDER_DELETE, provider)
    service.delete(provider_id)
    return {"success": True, "message": "Provider deleted successfully"}
