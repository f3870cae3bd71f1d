"""Document store used by every resource service.

Two backends implement the same contract:

- SqlDocumentStore keeps each document as a JSON row in the `documents`
  table (Postgres in production, SQLite for local runs and tests).
- FirestoreDocumentStore talks to Cloud Firestore through firebase_admin.

Documents are plain dicts. Returned documents always include their `id`;
the id is never stored inside the body.
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .collections import UNIQUE_FIELDS
from .config import STORE_BACKEND
from .database import get_db
from .errors import Conflict, NotFound, UpstreamFailure
from .models import DocumentRecord

logger = logging.getLogger(__name__)


def new_document_id() -> str:
    return uuid.uuid4().hex


def _body(doc: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in doc.items() if k != "id"}


class DocumentStore:
    """Contract for the document store backends."""

    def __init__(self, unique_fields: Optional[dict[str, str]] = None):
        self.unique_fields = UNIQUE_FIELDS if unique_fields is None else unique_fields

    def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        raise NotImplementedError

    def put(
        self,
        collection: str,
        doc: dict[str, Any],
        doc_id: Optional[str] = None,
        overwrite: bool = True,
    ) -> str:
        """Write a document and return its id.

        A new id is generated when doc_id is None. With overwrite=False an
        existing document with the same id raises Conflict, as does a
        duplicate value in the collection's unique field.
        """
        raise NotImplementedError

    def update(self, collection: str, doc_id: str, partial: dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> None:
        raise NotImplementedError

    def query(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """Equality filters joined with AND, optionally ordered by one field."""
        raise NotImplementedError

    def _unique_value(self, collection: str, body: dict[str, Any]) -> Optional[str]:
        field = self.unique_fields.get(collection)
        if not field or body.get(field) is None:
            return None
        return str(body[field])


class SqlDocumentStore(DocumentStore):
    def __init__(self, db: Session, unique_fields: Optional[dict[str, str]] = None):
        super().__init__(unique_fields)
        self.db = db

    def get(self, collection, doc_id):
        try:
            record = self.db.get(DocumentRecord, (collection, doc_id))
        except SQLAlchemyError as e:
            logger.error(f"❌ Store read failed for {collection}/{doc_id}: {e}")
            raise UpstreamFailure("Database read failed") from e
        if record is None:
            return None
        return {"id": record.id, **record.data}

    def put(self, collection, doc, doc_id=None, overwrite=True):
        doc_id = doc_id or new_document_id()
        body = _body(doc)
        unique_key = self._unique_value(collection, body)

        try:
            record = self.db.get(DocumentRecord, (collection, doc_id))
            if record is not None and not overwrite:
                raise Conflict(f"{collection[:-1].capitalize()} already exists")
            if record is not None:
                record.data = body
                record.unique_key = unique_key
            else:
                self.db.add(
                    DocumentRecord(collection=collection, id=doc_id, data=body, unique_key=unique_key)
                )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Duplicate document rejected in {collection}: {doc_id}")
            raise Conflict(f"{collection[:-1].capitalize()} already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Store write failed for {collection}/{doc_id}: {e}")
            raise UpstreamFailure("Database write failed") from e
        return doc_id

    def update(self, collection, doc_id, partial):
        try:
            record = self.db.get(DocumentRecord, (collection, doc_id))
            if record is None:
                raise NotFound(f"{collection[:-1].capitalize()} not found")
            # JSON columns are not mutation-tracked; assign a new dict
            record.data = {**record.data, **_body(partial)}
            record.unique_key = self._unique_value(collection, record.data)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise Conflict(f"{collection[:-1].capitalize()} already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Store update failed for {collection}/{doc_id}: {e}")
            raise UpstreamFailure("Database write failed") from e

    def delete(self, collection, doc_id):
        try:
            self.db.query(DocumentRecord).filter(
                DocumentRecord.collection == collection, DocumentRecord.id == doc_id
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Store delete failed for {collection}/{doc_id}: {e}")
            raise UpstreamFailure("Database write failed") from e

    def query(self, collection, filters=None, order_by=None, descending=False):
        q = self.db.query(DocumentRecord).filter(DocumentRecord.collection == collection)
        for field, value in (filters or {}).items():
            q = q.filter(_json_equals(field, value))
        if order_by:
            column = DocumentRecord.data[order_by].as_string()
            q = q.order_by(column.desc() if descending else column.asc())
        try:
            records = q.all()
        except SQLAlchemyError as e:
            logger.error(f"❌ Store query failed for {collection} {filters}: {e}")
            raise UpstreamFailure("Database read failed") from e
        return [{"id": r.id, **r.data} for r in records]


def _json_equals(field: str, value: Any):
    element = DocumentRecord.data[field]
    if isinstance(value, bool):
        return element.as_boolean() == value
    if isinstance(value, (int, float)):
        return element.as_float() == float(value)
    return element.as_string() == str(value)


class FirestoreDocumentStore(DocumentStore):
    """Cloud Firestore backend.

    Unique fields are guarded with marker documents in
    `<collection>__unique_<field>`, created with create() so a second
    writer fails with AlreadyExists.
    """

    def __init__(self, client=None, unique_fields: Optional[dict[str, str]] = None):
        super().__init__(unique_fields)
        if client is None:
            from firebase_admin import firestore

            from .firebase import get_firebase_app

            client = firestore.client(app=get_firebase_app())
        self.client = client

    def _marker(self, collection: str, value: str):
        field = self.unique_fields[collection]
        return self.client.collection(f"{collection}__unique_{field}").document(value)

    def get(self, collection, doc_id):
        from google.api_core import exceptions as gcp_exceptions

        try:
            snapshot = self.client.collection(collection).document(doc_id).get()
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error(f"❌ Firestore read failed for {collection}/{doc_id}: {e}")
            raise UpstreamFailure("Document store read failed") from e
        if not snapshot.exists:
            return None
        return {"id": snapshot.id, **snapshot.to_dict()}

    def put(self, collection, doc, doc_id=None, overwrite=True):
        from google.api_core import exceptions as gcp_exceptions

        ref = self.client.collection(collection).document(doc_id or new_document_id())
        body = _body(doc)
        unique_value = self._unique_value(collection, body)
        marker = self._marker(collection, unique_value) if unique_value is not None else None
        try:
            if marker is not None:
                marker.create({"documentId": ref.id})
        except gcp_exceptions.AlreadyExists as e:
            raise Conflict(f"{collection[:-1].capitalize()} already exists") from e
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error(f"❌ Firestore write failed for {collection}/{ref.id}: {e}")
            raise UpstreamFailure("Document store write failed") from e

        try:
            if overwrite:
                ref.set(body)
            else:
                ref.create(body)
        except gcp_exceptions.GoogleAPICallError as e:
            # The document was not written; release the unique value it claimed
            if marker is not None:
                marker.delete()
            if isinstance(e, gcp_exceptions.AlreadyExists):
                raise Conflict(f"{collection[:-1].capitalize()} already exists") from e
            logger.error(f"❌ Firestore write failed for {collection}/{ref.id}: {e}")
            raise UpstreamFailure("Document store write failed") from e
        return ref.id

    def update(self, collection, doc_id, partial):
        from google.api_core import exceptions as gcp_exceptions

        ref = self.client.collection(collection).document(doc_id)
        body = _body(partial)
        field = self.unique_fields.get(collection)
        try:
            if field and field in body:
                current = self.get(collection, doc_id)
                if current is None:
                    raise NotFound(f"{collection[:-1].capitalize()} not found")
                old_value = self._unique_value(collection, current)
                new_value = self._unique_value(collection, body)
                if old_value != new_value:
                    if new_value is not None:
                        self._marker(collection, new_value).create({"documentId": doc_id})
                    if old_value is not None:
                        self._marker(collection, old_value).delete()
            ref.update(body)
        except gcp_exceptions.NotFound as e:
            raise NotFound(f"{collection[:-1].capitalize()} not found") from e
        except gcp_exceptions.AlreadyExists as e:
            raise Conflict(f"{collection[:-1].capitalize()} already exists") from e
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error(f"❌ Firestore update failed for {collection}/{doc_id}: {e}")
            raise UpstreamFailure("Document store write failed") from e

    def delete(self, collection, doc_id):
        from google.api_core import exceptions as gcp_exceptions

        try:
            if collection in self.unique_fields:
                current = self.get(collection, doc_id)
                unique_value = self._unique_value(collection, current) if current else None
                if unique_value is not None:
                    self._marker(collection, unique_value).delete()
            self.client.collection(collection).document(doc_id).delete()
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error(f"❌ Firestore delete failed for {collection}/{doc_id}: {e}")
            raise UpstreamFailure("Document store write failed") from e

    def query(self, collection, filters=None, order_by=None, descending=False):
        from google.api_core import exceptions as gcp_exceptions
        from google.cloud.firestore_v1.base_query import FieldFilter
        from google.cloud.firestore_v1.query import Query

        q = self.client.collection(collection)
        for field, value in (filters or {}).items():
            q = q.where(filter=FieldFilter(field, "==", value))
        if order_by:
            q = q.order_by(order_by, direction=Query.DESCENDING if descending else Query.ASCENDING)
        try:
            return [{"id": snap.id, **snap.to_dict()} for snap in q.stream()]
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error(f"❌ Firestore query failed for {collection} {filters}: {e}")
            raise UpstreamFailure("Document store read failed") from e


def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    """Dependency injection for the configured document store"""
    if STORE_BACKEND == "firestore":
        return FirestoreDocumentStore()
    return SqlDocumentStore(db)
