"""Service listing service - offerings owned by a provider"""

from typing import Any, Optional

from ...collections import COLLECTION_SERVICES
from ..base import ResourceService


class ServiceListingService(ResourceService):
    collection = COLLECTION_SERVICES
    name = "Service"

    def apply_defaults(self, data: dict[str, Any]) -> dict[str, Any]:
        return {
            **data,
            "description": data.get("description") or "",
            "images": data.get("images") or [],
            "available": data.get("available") is not False,
        }

    def get_all(self, category: Optional[str] = None, available: Optional[bool] = None) -> list[dict]:
        return self.list({"category": category, "available": available})

    def get_by_provider_id(self, provider_id: str) -> list[dict]:
        return self.list({"providerId": provider_id})
