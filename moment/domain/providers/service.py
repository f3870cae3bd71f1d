"""Provider service - business profiles, approval status and visibility"""

import logging
from typing import Any, Optional

from ...collections import COLLECTION_PROVIDERS, COLLECTION_SERVICES
from ...shared.lifecycle import ProviderStatus, StatusLifecycle, provider_lifecycle
from ...store import DocumentStore
from ..base import ResourceService

logger = logging.getLogger(__name__)


class ProviderService(ResourceService):
    collection = COLLECTION_PROVIDERS
    name = "Provider"

    def __init__(self, store: DocumentStore, lifecycle: Optional[StatusLifecycle] = None):
        super().__init__(store)
        self.lifecycle = lifecycle or provider_lifecycle()

    def apply_defaults(self, data: dict[str, Any]) -> dict[str, Any]:
        return {
            **data,
            "category": data.get("category") or "other",
            "description": data.get("description") or "",
            "location": data.get("location") or "",
            "city": data.get("city") or "",
            "priceRange": data.get("priceRange") or "",
            "avatar": data.get("avatar") or "",
            "images": data.get("images") or [],
            "features": data.get("features") or [],
            "rating": 0,
            "reviewCount": 0,
            "status": ProviderStatus.PENDING.value,
            "published": False,
        }

    def find_by_uid(self, uid: str) -> Optional[dict]:
        providers = self.list({"uid": uid})
        return providers[0] if providers else None

    def get_all(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
        published: Optional[bool] = None,
    ) -> list[dict]:
        return self.list({"status": status, "category": category, "published": published})

    def update(self, doc_id: str, data: dict[str, Any]) -> dict:
        if "status" in data:
            current = self.get_or_404(doc_id)
            self.lifecycle.check(current.get("status"), data["status"])
        return super().update(doc_id, data)

    def update_status(self, doc_id: str, status: str) -> dict:
        provider = self.update(doc_id, {"status": status})
        logger.info(f"📋 Provider {doc_id} status set to '{status}'")
        return provider

    def set_published(self, doc_id: str, published: bool) -> dict:
        return super().update(doc_id, {"published": published})

    def delete(self, doc_id: str) -> None:
        """Delete the provider together with its services (bookings are kept)"""
        services = self.store.query(COLLECTION_SERVICES, {"providerId": doc_id})
        for service in services:
            self.store.delete(COLLECTION_SERVICES, service["id"])
        super().delete(doc_id)
        if services:
            logger.info(f"🗑️ Removed {len(services)} service(s) of provider {doc_id}")
