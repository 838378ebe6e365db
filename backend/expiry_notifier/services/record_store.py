# backend/expiry_notifier/services/record_store.py
"""
Record store capability used by the expiry pipeline.

Two operations only: an inclusive range query across every owner group, and
a key lookup inside a named collection. Implementations are synchronous; the
pipeline runs them in worker threads.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class StoreRecord:
    id: str
    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


class RecordStore(ABC):

    @abstractmethod
    def query_range_all_groups(
        self,
        field_name: str,
        lower: datetime,
        upper: datetime
    ) -> List[StoreRecord]:
        """Records whose field_name lies in [lower, upper], ordered by that field"""

    @abstractmethod
    def get_by_key(self, collection: str, key: str) -> Optional[StoreRecord]:
        """Record stored under key, or None when it does not exist"""
