"""Abstract base class for URL record store implementations."""

from abc import ABC, abstractmethod
from typing import Optional

from .models import InsertResult, UrlRecord


class URLRecordStoreBase(ABC):
    """Abstract base class for URL record store operations.

    Implementations must enforce a unique constraint on ``hash``.
    """

    @abstractmethod
    async def find_by_hash(self, hash: str) -> Optional[UrlRecord]:
        """Get the record stored under a hash.

        Args:
            hash: The hash to lookup

        Returns:
            The record (active or not) if found, None otherwise

        Raises:
            PersistenceError: If the store cannot be queried
        """
        pass

    @abstractmethod
    async def insert(self, record: UrlRecord) -> InsertResult:
        """Insert a new record.

        Args:
            record: The record to persist

        Returns:
            INSERTED with the stored record, or CONFLICT with the record
            already stored under the same hash

        Raises:
            PersistenceError: On any failure other than a hash conflict
        """
        pass

    @abstractmethod
    async def increment_visit_counter(self, hash: str) -> Optional[UrlRecord]:
        """Atomically add one to the visit counter of an active record.

        Args:
            hash: The hash of the record to update

        Returns:
            The updated record, or None if no active record matched

        Raises:
            PersistenceError: If the update fails
        """
        pass

    @abstractmethod
    async def update_active_state(
        self, hash: str, expected_active: Optional[bool] = None, **fields
    ) -> bool:
        """Update the lifecycle fields of a record.

        Accepted fields are ``active``, ``created_at``, ``removed_at``,
        ``visit_counter`` and ``remove_token``.

        Args:
            hash: The hash of the record to update
            expected_active: If given, only update when the stored ``active``
                flag still has this value (checked and written atomically)
            **fields: Columns to set

        Returns:
            True if a record was updated, False if none matched

        Raises:
            PersistenceError: If the update fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass


LIFECYCLE_FIELDS = frozenset(
    {"active", "created_at", "removed_at", "visit_counter", "remove_token"}
)


def check_lifecycle_fields(fields: dict) -> None:
    """Reject fields ``update_active_state`` is not allowed to touch."""
    unknown = set(fields) - LIFECYCLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
