# backend/expiry_notifier/services/sql_store.py
"""
SQLAlchemy implementation of the record store.

Rows are returned with the same field names as the Firestore documents
(name, household_id, expiry_date, members, fcm_token) so the pipeline does
not care which backend it reads from.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session, selectinload

from expiry_notifier.core.config import settings
from expiry_notifier.models.database import Household, InventoryItem, User
from expiry_notifier.services.record_store import RecordStore, StoreRecord

logger = logging.getLogger(__name__)


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


class SqlRecordStore(RecordStore):

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory
        # Sessions are not thread-safe and SQLite may share one connection
        self._lock = threading.Lock()
        self._loaders: Dict[str, Callable[[Session, str], Optional[StoreRecord]]] = {
            settings.households_collection: self._load_household,
            settings.users_collection: self._load_user,
        }

    def query_range_all_groups(
        self,
        field_name: str,
        lower: datetime,
        upper: datetime
    ) -> List[StoreRecord]:
        column = getattr(InventoryItem, field_name, None)
        if column is None:
            raise ValueError(f"Unknown inventory field: {field_name}")

        with self._lock, self.session_factory() as session:
            rows = session.query(InventoryItem).filter(
                and_(
                    column >= _to_naive_utc(lower),
                    column <= _to_naive_utc(upper)
                )
            ).order_by(column.asc(), InventoryItem.id.asc()).all()

            return [
                StoreRecord(
                    id=row.id,
                    data={
                        "name": row.name,
                        "household_id": row.household_id,
                        "expiry_date": _as_utc(row.expiry_date),
                    }
                )
                for row in rows
            ]

    def get_by_key(self, collection: str, key: str) -> Optional[StoreRecord]:
        loader = self._loaders.get(collection)
        if loader is None:
            raise ValueError(f"Unknown collection: {collection}")

        with self._lock, self.session_factory() as session:
            return loader(session, key)

    def _load_household(self, session: Session, key: str) -> Optional[StoreRecord]:
        household = session.query(Household).options(
            selectinload(Household.members)
        ).filter(Household.id == key).first()
        if household is None:
            return None
        return StoreRecord(
            id=household.id,
            data={
                "name": household.name,
                "members": [member.user_id for member in household.members],
            }
        )

    def _load_user(self, session: Session, key: str) -> Optional[StoreRecord]:
        user = session.get(User, key)
        if user is None:
            return None
        return StoreRecord(id=user.id, data={"fcm_token": user.fcm_token})
