# backend/expiry_notifier/services/providers.py
"""Select and build the record store and push transport from settings"""

import logging
from functools import lru_cache

from expiry_notifier.core.config import settings
from expiry_notifier.core.errors import InitializationError
from expiry_notifier.core.firebase import get_firebase_app
from expiry_notifier.services.push_transport import FcmTransport, MockPushTransport, PushTransport
from expiry_notifier.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def _init_firestore_store() -> RecordStore:
    from expiry_notifier.services.firestore_store import FirestoreRecordStore

    app = get_firebase_app()
    try:
        return FirestoreRecordStore.from_app(app, settings.inventory_collection)
    except Exception as e:
        logger.error(f"Failed to initialize Firestore client: {str(e)}")
        raise InitializationError(f"Firestore initialization failed: {e}") from e


def _init_sql_store() -> RecordStore:
    from expiry_notifier.models.database import SessionLocal
    from expiry_notifier.services.sql_store import SqlRecordStore

    return SqlRecordStore(SessionLocal)


@lru_cache
def get_record_store() -> RecordStore:
    """FastAPI dependency; failures are not cached so a later call can retry"""
    backend = settings.record_store.lower()
    if backend == "firestore":
        return _init_firestore_store()
    if backend == "sql":
        return _init_sql_store()
    raise InitializationError(f"Unknown record store: {settings.record_store}")


@lru_cache
def get_push_transport() -> PushTransport:
    provider = settings.push_provider.lower()
    if provider == "fcm":
        return FcmTransport(get_firebase_app())
    if provider == "mock":
        logger.warning("Push provider is 'mock' - notifications will only be logged")
        return MockPushTransport()
    raise InitializationError(f"Unknown push provider: {settings.push_provider}")
