"""Data models for the URL record store."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass
class UrlRecord:
    """A shortened URL as persisted in the store."""

    url: str
    hash: str
    remove_token: str
    protocol: str = ""
    domain: str = ""
    path: str = ""
    is_custom: bool = False
    active: bool = True
    visit_counter: int = 1
    created_at: datetime = field(default_factory=utcnow)
    removed_at: Optional[datetime] = None

    def copy(self, **changes) -> "UrlRecord":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "url": self.url,
            "protocol": self.protocol,
            "domain": self.domain,
            "path": self.path,
            "hash": self.hash,
            "is_custom": self.is_custom,
            "remove_token": self.remove_token,
            "active": self.active,
            "visit_counter": self.visit_counter,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "removed_at": self.removed_at.isoformat() if self.removed_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UrlRecord":
        """Create from dictionary (or a database row)."""
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        removed_at = data.get("removed_at")
        if isinstance(removed_at, str):
            removed_at = datetime.fromisoformat(removed_at)

        return cls(
            url=data["url"],
            hash=data["hash"],
            remove_token=data["remove_token"],
            protocol=data.get("protocol") or "",
            domain=data.get("domain") or "",
            path=data.get("path") or "",
            is_custom=bool(data.get("is_custom", False)),
            active=bool(data.get("active", True)),
            visit_counter=data.get("visit_counter", 1),
            created_at=created_at or utcnow(),
            removed_at=removed_at,
        )


class InsertStatus(Enum):
    """Outcome of an insert against the unique hash index."""

    INSERTED = "inserted"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class InsertResult:
    """Tagged result of ``URLRecordStoreBase.insert``.

    On ``CONFLICT`` the record is the one already stored under the hash.
    """

    status: InsertStatus
    record: UrlRecord

    @property
    def conflict(self) -> bool:
        return self.status is InsertStatus.CONFLICT
