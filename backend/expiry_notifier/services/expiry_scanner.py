# backend/expiry_notifier/services/expiry_scanner.py
"""Find inventory records expiring inside a scan window"""

import logging
from typing import List

from expiry_notifier.core.config import settings
from expiry_notifier.models.records import (
    Accepted, InventoryItem, ScanOutcome, ScanWindow, Skipped, SkipReason
)
from expiry_notifier.services.record_store import RecordStore, StoreRecord

logger = logging.getLogger(__name__)

DEFAULT_ITEM_NAME = "Món ăn"


def to_outcome(record: StoreRecord, expiry_field: str = "expiry_date") -> ScanOutcome:
    """Validate one inventory record; records without a household are skipped"""
    name = record.get("name") or DEFAULT_ITEM_NAME
    household_id = record.get("household_id")

    if household_id is None or not str(household_id).strip():
        logger.warning(f"Item '{name}' ({record.id}) has no household_id - skipping")
        return Skipped(record_id=record.id, reason=SkipReason.MISSING_HOUSEHOLD_ID)

    return Accepted(
        InventoryItem(
            id=record.id,
            name=str(name),
            household_id=str(household_id).strip(),
            expiry_date=record.get(expiry_field)
        )
    )


def scan_expiring_items(
    store: RecordStore,
    window: ScanWindow,
    expiry_field: str = None
) -> List[ScanOutcome]:
    """
    Query every inventory record whose expiry lies in the window (inclusive).

    Returns one outcome per matching record, in store order. An empty list
    means nothing expires in the window.
    """
    expiry_field = expiry_field or settings.expiry_field
    records = store.query_range_all_groups(expiry_field, window.start, window.end)

    if not records:
        logger.info("No items expiring in the scan window")
        return []

    logger.info(f"Found {len(records)} items expiring between {window.start.isoformat()} and {window.end.isoformat()}")
    return [to_outcome(record, expiry_field) for record in records]
