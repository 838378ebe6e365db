#!/usr/bin/env python3
"""
Demo data for the SQL record store.

Creates one household with two members and a handful of inventory items, two
of which expire tomorrow, so a local run with RECORD_STORE=sql and
PUSH_PROVIDER=mock has something to notify about.
"""

import logging
from datetime import datetime, time, timedelta, timezone
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from expiry_notifier.core.config import settings
from expiry_notifier.init_db import init_database
from expiry_notifier.models.database import Household, HouseholdMember, InventoryItem, SessionLocal, User

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_HOUSEHOLD_ID = "demo-household"

DEMO_USERS = [
    {"id": "demo-user-1", "display_name": "Lan", "fcm_token": "demo-fcm-token-lan-0001"},
    {"id": "demo-user-2", "display_name": "Minh", "fcm_token": None},
]

# (name, days from today, hour in local time)
DEMO_ITEMS = [
    ("Sữa tươi", 1, 9),
    ("Trứng gà", 1, 18),
    ("Rau muống", 0, 20),
    ("Thịt bò", 3, 12),
]


def _local_today(tz: Optional[str]) -> datetime:
    if tz:
        return datetime.now(ZoneInfo(tz))
    return datetime.now().astimezone()


def _naive_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def seed_demo_household(db: Session, today: Optional[datetime] = None) -> Dict[str, List[str]]:
    """
    Insert the demo household, replacing an earlier copy.
    Returns the ids that were created.
    """
    today = today or _local_today(settings.scan_timezone)

    existing = db.get(Household, DEMO_HOUSEHOLD_ID)
    if existing:
        logger.info("Removing previous demo household")
        db.query(InventoryItem).filter(InventoryItem.household_id == DEMO_HOUSEHOLD_ID).delete()
        db.delete(existing)
        for user in DEMO_USERS:
            db.query(User).filter(User.id == user["id"]).delete()
        db.flush()

    household = Household(id=DEMO_HOUSEHOLD_ID, name="Demo household")
    for position, user in enumerate(DEMO_USERS):
        db.add(User(**user))
        household.members.append(HouseholdMember(user_id=user["id"], position=position))
    db.add(household)

    item_ids = []
    for index, (name, days, hour) in enumerate(DEMO_ITEMS):
        local_day = (today + timedelta(days=days)).date()
        expiry = datetime.combine(local_day, time(hour), tzinfo=today.tzinfo)
        item_id = f"demo-item-{index + 1}"
        db.add(InventoryItem(
            id=item_id,
            name=name,
            household_id=DEMO_HOUSEHOLD_ID,
            expiry_date=_naive_utc(expiry)
        ))
        item_ids.append(item_id)

    db.commit()
    logger.info(f"Seeded household {DEMO_HOUSEHOLD_ID} with {len(item_ids)} items")
    return {"users": [u["id"] for u in DEMO_USERS], "items": item_ids}


def main():
    init_database()
    db = SessionLocal()
    try:
        seed_demo_household(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
