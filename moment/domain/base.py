"""Resource service base - timestamps, defaults and shallow-merge updates"""

import logging
from typing import Any, Optional

from ..errors import NotFound
from ..shared.lifecycle import utc_now_iso
from ..store import DocumentStore

logger = logging.getLogger(__name__)

# Keys the server owns; client values for these are dropped
SERVER_FIELDS = ("id", "createdAt", "updatedAt")


def strip_server_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k not in SERVER_FIELDS}


class ResourceService:
    """CRUD over one collection.

    Subclasses set `collection` and `name` and override `apply_defaults`.
    """

    collection: str = ""
    name: str = "Resource"

    def __init__(self, store: DocumentStore):
        self.store = store

    def apply_defaults(self, data: dict[str, Any]) -> dict[str, Any]:
        return dict(data)

    def create(self, data: dict[str, Any], doc_id: Optional[str] = None, overwrite: bool = True) -> dict:
        doc = self.apply_defaults(strip_server_fields(data))
        now = utc_now_iso()
        doc["createdAt"] = now
        doc["updatedAt"] = now
        new_id = self.store.put(self.collection, doc, doc_id=doc_id, overwrite=overwrite)
        logger.info(f"✅ Created {self.name.lower()} {new_id}")
        return {"id": new_id, **doc}

    def get_by_id(self, doc_id: str) -> Optional[dict]:
        return self.store.get(self.collection, doc_id)

    def get_or_404(self, doc_id: str) -> dict:
        doc = self.get_by_id(doc_id)
        if doc is None:
            raise NotFound(f"{self.name} not found")
        return doc

    def update(self, doc_id: str, data: dict[str, Any]) -> dict:
        """Shallow-merge data over the stored document and refresh updatedAt"""
        patch = strip_server_fields(data)
        patch["updatedAt"] = utc_now_iso()
        self.store.update(self.collection, doc_id, patch)
        return self.get_or_404(doc_id)

    def delete(self, doc_id: str) -> None:
        self.store.delete(self.collection, doc_id)
        logger.info(f"🗑️ Deleted {self.name.lower()} {doc_id}")

    def list(
        self,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict]:
        """Equality filters (None values ignored), AND-ed together"""
        active = {k: v for k, v in (filters or {}).items() if v is not None}
        return self.store.query(self.collection, active, order_by=order_by, descending=descending)
