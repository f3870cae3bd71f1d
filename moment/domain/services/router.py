"""Service listing router - offerings are owned through their provider"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...auth import Principal, get_current_principal, get_optional_principal
from ...policy import Action, authorize
from ...store import DocumentStore, get_store
from ..providers.router import get_provider_service
from ..providers.service import ProviderService
from .schemas import ServiceCreate, ServiceUpdate
from .service import ServiceListingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["Services"])


def get_service_listing_service(store: DocumentStore = Depends(get_store)) -> ServiceListingService:
    """Dependency injection for ServiceListingService"""
    return ServiceListingService(store)


def _owning_provider(providers: ProviderService, service: dict) -> dict:
    # A service whose provider is gone is only manageable by admins
    provider_id = service.get("providerId")
    return (providers.get_by_id(provider_id) if provider_id else None) or {}


@router.get("")
def get_services(
    category: Optional[str] = Query(None),
    available: Optional[bool] = Query(None),
    principal: Optional[Principal] = Depends(get_optional_principal),
    service: ServiceListingService = Depends(get_service_listing_service),
):
    authorize(principal, Action.SERVICE_READ)
    return {"success": True, "services": service.get_all(category=category, available=available)}


@router.get("/provider/{provider_id}")
def get_provider_services(
    provider_id: str,
    principal: Optional[Principal] = Depends(get_optional_principal),
    service: ServiceListingService = Depends(get_service_listing_service),
):
    authorize(principal, Action.SERVICE_READ)
    return {"success": True, "services": service.get_by_provider_id(provider_id)}


@router.get("/{service_id}")
def get_service(
    service_id: str,
    principal: Optional[Principal] = Depends(get_optional_principal),
    service: ServiceListingService = Depends(get_service_listing_service),
):
    authorize(principal, Action.SERVICE_READ)
    return {"success": True, "service": service.get_or_404(service_id)}


@router.post("", status_code=201)
def create_service(
    data: ServiceCreate,
    principal: Principal = Depends(get_current_principal),
    service: ServiceListingService = Depends(get_service_listing_service),
    providers: ProviderService = Depends(get_provider_service),
):
    """Create a service under a provider the caller owns"""
    provider = providers.get_or_404(data.providerId)
    authorize(principal, Action.SERVICE_CREATE, provider)
    created = service.create(data.model_dump(exclude_unset=True))
    return {"success": True, "service": created}


@router.put("/{service_id}")
def update_service(
    service_id: str,
    data: ServiceUpdate,
    principal: Principal = Depends(get_current_principal),
    service: ServiceListingService = Depends(get_service_listing_service),
    providers: ProviderService = Depends(get_provider_service),
):
    existing = service.get_or_404(service_id)
    authorize(principal, Action.SERVICE_UPDATE, _owning_provider(providers, existing))

    updates = data.model_dump(exclude_unset=True)
    new_provider_id = updates.get("providerId")
    if new_provider_id is not None and new_provider_id != existing.get("providerId"):
        # Moving a listing requires owning the target provider too
        authorize(principal, Action.SERVICE_UPDATE, providers.get_or_404(new_provider_id))

    return {"success": True, "service": service.update(service_id, updates)}


@router.delete("/{service_id}")
def delete_service(
    service_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ServiceListingService = Depends(get_service_listing_service),
    providers: ProviderService = Depends(get_provider_service),
):
    existing = service.get_or_404(service_id)
    authorize(principal, Action.SERVICE_DELETE, _owning_provider(providers, existing))
    service.delete(service_id)
    return {"success": True, "message": "Service deleted successfully"}
