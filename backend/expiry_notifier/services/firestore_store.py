# backend/expiry_notifier/services/firestore_store.py
"""Firestore implementation of the record store"""

import logging
from datetime import datetime
from typing import List, Optional

from firebase_admin import firestore

from expiry_notifier.services.record_store import RecordStore, StoreRecord

logger = logging.getLogger(__name__)


class FirestoreRecordStore(RecordStore):
    """
    Range queries run as collection-group queries, so inventory sub-collections
    under every household are searched at once.
    """

    def __init__(self, client, group_collection: str):
        self.client = client
        self.group_collection = group_collection

    @classmethod
    def from_app(cls, app, group_collection: str) -> "FirestoreRecordStore":
        return cls(firestore.client(app=app), group_collection)

    def query_range_all_groups(
        self,
        field_name: str,
        lower: datetime,
        upper: datetime
    ) -> List[StoreRecord]:
        query = (
            self.client.collection_group(self.group_collection)
            .where(filter=firestore.FieldFilter(field_name, ">=", lower))
            .where(filter=firestore.FieldFilter(field_name, "<=", upper))
        )
        snapshots = query.get()
        logger.debug(f"Collection group '{self.group_collection}' returned {len(snapshots)} documents")
        return [StoreRecord(id=doc.id, data=doc.to_dict() or {}) for doc in snapshots]

    def get_by_key(self, collection: str, key: str) -> Optional[StoreRecord]:
        snapshot = self.client.collection(collection).document(key).get()
        if not snapshot.exists:
            return None
        return StoreRecord(id=snapshot.id, data=snapshot.to_dict() or {})
