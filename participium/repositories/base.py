"""
Base repository: a thin wrapper around one Firestore collection.

Documents are returned as plain dicts with the document id under "id" and
Firestore timestamps converted to datetime objects.
"""

from firebase_admin import firestore
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from participium.config.firebase import get_db
from participium.utils.firestore_helpers import where_filter

logger = logging.getLogger(__name__)


class FirestoreRepository:
    """
    CRUD helpers shared by every collection repository.
    Subclasses set `collection_name` and add their own queries.
    """

    collection_name: str = ""

    def __init__(self, db=None):
        self.db = db if db is not None else get_db()

    @property
    def collection(self):
        return self.db.collection(self.collection_name)

    def find_by_id(self, doc_id: Optional[str]) -> Optional[Dict]:
        if not doc_id:
            return None
        doc = self.collection.document(doc_id).get()
        if not doc.exists:
            return None
        return self._to_dict(doc)

    def create(self, data: Dict[str, Any]) -> Dict:
        """
        Insert a new document with server-side created_at / updated_at.

        Returns:
            The stored document, read back so timestamps are resolved
        """
        doc_ref = self.collection.document()
        doc_ref.set({
            **data,
            "created_at": firestore.SERVER_TIMESTAMP,
            "updated_at": firestore.SERVER_TIMESTAMP,
        })
        return self._to_dict(doc_ref.get())

    def update(self, doc_id: str, data: Dict[str, Any]) -> Dict:
        doc_ref = self.collection.document(doc_id)
        doc_ref.update({**data, "updated_at": firestore.SERVER_TIMESTAMP})
        return self._to_dict(doc_ref.get())

    def delete(self, doc_id: str) -> None:
        self.collection.document(doc_id).delete()

    def find_where(self, *filters, limit: Optional[int] = None) -> List[Dict]:
        """
        Run a query built from (field, op, value) filters.

        Usage:
            repo.find_where(("status", "==", "ASSIGNED"), ("category", "==", "WASTE"))
        """
        query = self.collection
        for field_path, op_string, value in filters:
            query = where_filter(query, field_path, op_string, value)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_dict(doc) for doc in query.stream()]

    def find_one_where(self, *filters) -> Optional[Dict]:
        rows = self.find_where(*filters, limit=1)
        return rows[0] if rows else None

    def _to_dict(self, doc) -> Dict:
        data = self._convert_timestamps(doc.to_dict() or {})
        data["id"] = doc.id
        return data

    def _convert_timestamps(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Convert Firestore Timestamp values to Python datetime objects.
        DatetimeWithNanoseconds is already a datetime and is kept as is.
        """
        for key, value in data.items():
            if value is None or isinstance(value, datetime):
                continue
            if hasattr(value, "to_datetime"):
                try:
                    data[key] = value.to_datetime()
                except Exception as e:
                    logger.warning(f"Failed to convert {key} timestamp: {e}")
        return data
