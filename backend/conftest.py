# conftest.py
"""
Pytest configuration and fixtures for the expiry notifier tests
Provides record store doubles, push transport doubles, an in-memory SQL
store and an API client
"""

import pytest
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from expiry_notifier.core.config import settings
from expiry_notifier.models.database import Base
from expiry_notifier.services.push_transport import PushTransport
from expiry_notifier.services.record_store import RecordStore, StoreRecord
from expiry_notifier.services.sql_store import SqlRecordStore

TEST_TZ = "Asia/Ho_Chi_Minh"
VALID_TOKEN = "fcm-token-0123456789"


# ===== TIME FIXTURES =====

@pytest.fixture
def scan_now() -> datetime:
    """Fixed scan invocation time: 19 Oct 2026, 15:30 in Ho Chi Minh City"""
    return datetime(2026, 10, 19, 15, 30, tzinfo=ZoneInfo(TEST_TZ))


@pytest.fixture
def tomorrow_noon(scan_now: datetime) -> datetime:
    return (scan_now + timedelta(days=1)).replace(hour=12, minute=0)


# ===== RECORD STORE FIXTURES =====

def build_store(
    items: List[StoreRecord],
    households: Optional[Dict[str, Optional[List[str]]]] = None,
    users: Optional[Dict[str, Optional[str]]] = None
) -> MagicMock:
    """
    Record store double with call recording.

    households maps id -> member list, users maps id -> fcm_token (None for a
    user without a token). Missing ids behave as not found.
    """
    households = households or {}
    users = users or {}
    store = MagicMock(spec=RecordStore)
    store.query_range_all_groups.return_value = list(items)

    def get_by_key(collection: str, key: str):
        if collection == settings.households_collection and key in households:
            return StoreRecord(id=key, data={"members": households[key]})
        if collection == settings.users_collection and key in users:
            return StoreRecord(id=key, data={"fcm_token": users[key]})
        return None

    store.get_by_key.side_effect = get_by_key
    return store


def item_record(record_id: str, name: Optional[str], household_id: Optional[str], expiry: datetime = None) -> StoreRecord:
    data = {"household_id": household_id, "expiry_date": expiry}
    if name is not None:
        data["name"] = name
    return StoreRecord(id=record_id, data=data)


@pytest.fixture
def store_factory():
    return build_store


@pytest.fixture
def make_item():
    return item_record


@pytest.fixture
def valid_token() -> str:
    return VALID_TOKEN


@pytest.fixture
def empty_store() -> MagicMock:
    return build_store([])


# ===== PUSH TRANSPORT FIXTURES =====

@pytest.fixture
def mock_transport() -> MagicMock:
    """Push transport that accepts every message"""
    transport = MagicMock(spec=PushTransport)
    transport.send.side_effect = lambda token, title, body, data: f"msg-{token[-4:]}"
    return transport


# ===== DATABASE FIXTURES =====

@pytest.fixture(scope="function")
def test_engine():
    """Clean in-memory SQLite database for each test"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture(scope="function")
def test_session_factory(test_engine):
    Base.metadata.create_all(bind=test_engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def test_db(test_session_factory):
    db = test_session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def sql_store(test_session_factory) -> SqlRecordStore:
    return SqlRecordStore(test_session_factory)


# ===== SETTINGS FIXTURES =====

@pytest.fixture
def cron_secret(monkeypatch) -> str:
    secret = "test-cron-secret"
    monkeypatch.setattr(settings, "cron_secret", secret)
    return secret


@pytest.fixture
def no_cron_secret(monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", None)


# ===== API CLIENT FIXTURES =====

@pytest.fixture
def client():
    """Test client; dependency overrides are cleared afterwards"""
    from expiry_notifier.main import app

    with TestClient(app) as api_client:
        yield api_client
    app.dependency_overrides.clear()


# ===== PYTEST CONFIGURATION =====

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (services working together)"
    )
