# backend/expiry_notifier/models/records.py
"""
In-memory records that flow through one expiry scan.

InventoryItem, Household and ExpiryUser are read-only snapshots of store
records; NotificationTarget is the per-user working state built while
resolving a scan and thrown away after dispatch.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class ScanWindow:
    """Inclusive [start, end] bounds of the day being scanned"""
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass(frozen=True)
class InventoryItem:
    id: str
    name: str
    household_id: str
    expiry_date: Optional[datetime] = None


@dataclass(frozen=True)
class Household:
    id: str
    members: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExpiryUser:
    id: str
    fcm_token: Optional[str] = None

    def has_valid_token(self, min_length: int) -> bool:
        return isinstance(self.fcm_token, str) and len(self.fcm_token) >= min_length


@dataclass
class NotificationTarget:
    """Push token plus the names of a user's expiring items, in scan order"""
    user_id: str
    token: str
    items: List[str] = field(default_factory=list)


class SkipReason(str, Enum):
    MISSING_HOUSEHOLD_ID = "missing_household_id"
    HOUSEHOLD_NOT_FOUND = "household_not_found"
    EMPTY_MEMBERS = "empty_members"
    USER_NOT_FOUND = "user_not_found"
    INVALID_TOKEN = "invalid_token"


@dataclass(frozen=True)
class Accepted:
    item: InventoryItem


@dataclass(frozen=True)
class Skipped:
    record_id: str
    reason: SkipReason


ScanOutcome = Union[Accepted, Skipped]


@dataclass(frozen=True)
class ExpiryMessage:
    user_id: str
    token: str
    title: str
    body: str
    data: Dict[str, str]


class ScanStatus(str, Enum):
    NO_ITEMS = "no-items"
    NO_RECIPIENTS = "no-recipients"
    DISPATCHED = "dispatched"
    INTERNAL_ERROR = "internal-error"


class PipelineStage(str, Enum):
    IDLE = "idle"
    WINDOW_COMPUTED = "window_computed"
    SCANNED = "scanned"
    RESOLVED = "resolved"
    DISPATCHED = "dispatched"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ScanResult:
    status: ScanStatus
    sent_count: int = 0
    total_candidates: int = 0
    skipped_items: int = 0
    detail: Optional[str] = None
    stage: PipelineStage = PipelineStage.DONE

    @property
    def success(self) -> bool:
        return self.status != ScanStatus.INTERNAL_ERROR
