"""In-memory record store.

Used for tests and single-process deployments that do not need durability.
"""

import asyncio
import logging
from typing import Dict, Optional

from .base import URLRecordStoreBase, check_lifecycle_fields
from .models import InsertResult, InsertStatus, UrlRecord


class InMemoryURLStore(URLRecordStoreBase):
    """Dictionary-backed store keyed by hash."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._records: Dict[str, UrlRecord] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._records)

    async def find_by_hash(self, hash: str) -> Optional[UrlRecord]:
        record = self._records.get(hash)
        # Hand out copies so callers never mutate stored state
        return record.copy() if record else None

    async def insert(self, record: UrlRecord) -> InsertResult:
        async with self._lock:
            existing = self._records.get(record.hash)
            if existing is not None:
                self.logger.debug(f"Hash already stored: {record.hash}")
                return InsertResult(InsertStatus.CONFLICT, existing.copy())

            self._records[record.hash] = record.copy()

        self.logger.debug(f"Inserted record: {record.hash} -> {record.url}")
        return InsertResult(InsertStatus.INSERTED, record.copy())

    async def increment_visit_counter(self, hash: str) -> Optional[UrlRecord]:
        async with self._lock:
            record = self._records.get(hash)
            if record is None or not record.active:
                return None
            record.visit_counter += 1
            return record.copy()

    async def update_active_state(
        self, hash: str, expected_active: Optional[bool] = None, **fields
    ) -> bool:
        check_lifecycle_fields(fields)

        async with self._lock:
            record = self._records.get(hash)
            if record is None:
                return False
            if expected_active is not None and record.active != expected_active:
                return False
            self._records[hash] = record.copy(**fields)
            return True

    async def close(self) -> None:
        pass

    async def health_check(self) -> bool:
        return True
