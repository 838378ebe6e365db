# backend/expiry_notifier/services/recipient_resolver.py
"""
Map expiring items to the household members who should hear about them.

Lookups fan out with bounded concurrency. Every distinct household id and
user id is fetched from the store at most once per resolve() call, and item
names are appended to targets strictly in scan order.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TypeVar

from expiry_notifier.core.config import settings
from expiry_notifier.models.records import (
    ExpiryUser, Household, InventoryItem, NotificationTarget, Skipped, SkipReason
)
from expiry_notifier.services.record_store import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ResolutionResult:
    targets: Dict[str, NotificationTarget] = field(default_factory=dict)
    skipped: List[Skipped] = field(default_factory=list)
    rejected_users: Dict[str, SkipReason] = field(default_factory=dict)


class _FetchOnce:
    """Per-scan memo: check-then-fetch-then-insert under a per-key lock"""

    def __init__(self, semaphore: asyncio.Semaphore):
        self.semaphore = semaphore
        self.values: Dict[str, object] = {}
        self.locks: Dict[str, asyncio.Lock] = {}

    async def get(self, key: str, fetch: Callable[[str], T]) -> Optional[T]:
        lock = self.locks.setdefault(key, asyncio.Lock())
        async with lock:
            if key not in self.values:
                async with self.semaphore:
                    self.values[key] = await asyncio.to_thread(fetch, key)
            return self.values[key]


class RecipientResolver:

    def __init__(
        self,
        store: RecordStore,
        min_token_length: int = None,
        max_concurrency: int = None,
        households_collection: str = None,
        users_collection: str = None
    ):
        self.store = store
        self.min_token_length = min_token_length or settings.min_token_length
        self.max_concurrency = max(1, max_concurrency or settings.max_concurrency)
        self.households_collection = households_collection or settings.households_collection
        self.users_collection = users_collection or settings.users_collection

    def _fetch_household(self, household_id: str) -> Optional[Household]:
        record = self.store.get_by_key(self.households_collection, household_id)
        if record is None:
            return None

        members = record.get("members") or []
        if not isinstance(members, (list, tuple)):
            logger.warning(f"Household {household_id} has malformed members field - treating as empty")
            members = []
        # Members form a set; a repeated id must not double-count items
        return Household(id=record.id, members=list(dict.fromkeys(str(uid) for uid in members if uid)))

    def _fetch_user(self, user_id: str) -> Optional[ExpiryUser]:
        record = self.store.get_by_key(self.users_collection, user_id)
        if record is None:
            return None

        token = record.get("fcm_token")
        return ExpiryUser(id=record.id, fcm_token=token if isinstance(token, str) else None)

    async def resolve(self, items: List[InventoryItem]) -> ResolutionResult:
        result = ResolutionResult()
        if not items:
            return result

        semaphore = asyncio.Semaphore(self.max_concurrency)
        households = _FetchOnce(semaphore)
        users = _FetchOnce(semaphore)

        await asyncio.gather(*[households.get(item.household_id, self._fetch_household) for item in items])

        member_ids = [
            uid
            for item in items
            if households.values.get(item.household_id) is not None
            for uid in households.values[item.household_id].members
        ]
        await asyncio.gather(*[users.get(uid, self._fetch_user) for uid in member_ids])

        # Assembly is single-writer and follows scan order
        for item in items:
            household: Optional[Household] = households.values.get(item.household_id)

            if household is None:
                logger.warning(f"Household {item.household_id} not found for item '{item.name}' - skipping")
                result.skipped.append(Skipped(record_id=item.id, reason=SkipReason.HOUSEHOLD_NOT_FOUND))
                continue

            if not household.members:
                logger.warning(f"Household {household.id} has no members - skipping item '{item.name}'")
                result.skipped.append(Skipped(record_id=item.id, reason=SkipReason.EMPTY_MEMBERS))
                continue

            for uid in household.members:
                target = self._target_for(uid, users.values.get(uid), result)
                if target is not None:
                    target.items.append(item.name)

        logger.info(
            f"Resolved {len(result.targets)} notifiable users "
            f"({len(result.rejected_users)} rejected, {len(result.skipped)} items skipped)"
        )
        return result

    def _target_for(
        self,
        uid: str,
        user: Optional[ExpiryUser],
        result: ResolutionResult
    ) -> Optional[NotificationTarget]:
        if uid in result.targets:
            return result.targets[uid]
        if uid in result.rejected_users:
            return None

        if user is None:
            logger.warning(f"User {uid} is a household member but has no user record")
            result.rejected_users[uid] = SkipReason.USER_NOT_FOUND
            return None

        if not user.has_valid_token(self.min_token_length):
            logger.warning(f"User {uid} found but has no valid push token")
            result.rejected_users[uid] = SkipReason.INVALID_TOKEN
            return None

        target = NotificationTarget(user_id=uid, token=user.fcm_token)
        result.targets[uid] = target
        return target
