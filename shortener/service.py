"""Business logic service for URL shortener."""

import logging
from typing import Dict, Optional

from .common.url_builder import split_url
from .common.validators import is_valid_url
from .errors import HashCollisionError, InvalidUrlError, PersistenceError
from .hashing import HashGenerator
from .store.base import URLRecordStoreBase
from .store.models import UrlRecord, utcnow
from .views import PublicViewFormatter


class ShortURLService:
    """Service layer for the lifecycle of shortened URLs.

    States per hash are absent, active and inactive. ``shorten`` moves absent
    to active, ``disable`` moves active to inactive, and ``shorten`` or
    ``enable`` bring an inactive hash back with a new remove token and the
    visit counter reset to 1. Records are never deleted.

    The service holds no locks: at most one record per hash is guaranteed by
    the store's unique constraint.
    """

    def __init__(
        self,
        store: URLRecordStoreBase,
        formatter: PublicViewFormatter,
        hash_generator: Optional[HashGenerator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize URL shortener service.

        Args:
            store: Record store instance
            formatter: Builds the public view of records
            hash_generator: Optional hash generator (deterministic strategy if not given)
            logger: Optional logger
        """
        self.store = store
        self.formatter = formatter
        self.hash_generator = hash_generator or HashGenerator()
        self.logger = logger or logging.getLogger(__name__)

    def public_view(self, record: UrlRecord) -> Dict[str, str]:
        return self.formatter.to_public_view(record)

    async def resolve(self, hash: str) -> Optional[UrlRecord]:
        """Get the record stored under a hash, active or not.

        Args:
            hash: The hash to lookup

        Returns:
            The stored record or None
        """
        return await self.store.find_by_hash(hash)

    async def create_or_fetch(self, url: str) -> Dict[str, str]:
        """Shorten a URL, reviving or reusing the record already stored for it.

        Args:
            url: The URL to shorten

        Returns:
            Public view of the active record

        Raises:
            InvalidUrlError: If the URL is not a valid absolute URI
            PersistenceError: If the store fails
        """
        self._validate(url)

        hash = await self.hash_generator.generate_hash(url)
        existing = await self.store.find_by_hash(hash)

        if existing is None:
            return await self.shorten(url, hash)

        self._check_same_url(existing, url)
        if not existing.active:
            # Previously removed, bring it back
            return await self.enable(existing)

        return self.public_view(existing)

    async def shorten(self, url: str, hash: str) -> Dict[str, str]:
        """Create the record for a URL under the given hash.

        A hash conflict is a success: the stored record is returned, and
        enabled first if it had been removed.

        Args:
            url: The URL to shorten
            hash: The hash generated for the URL

        Returns:
            Public view of the active record

        Raises:
            InvalidUrlError: If the URL is not a valid absolute URI
            HashCollisionError: If the hash belongs to a different URL
            PersistenceError: If the store fails
        """
        self._validate(url)

        # Components are kept for metrics only
        protocol, domain, path = split_url(url)

        record = UrlRecord(
            url=url,
            protocol=protocol,
            domain=domain,
            path=path,
            hash=hash,
            is_custom=False,
            remove_token=self.hash_generator.generate_remove_token(),
            active=True,
            visit_counter=1,
            created_at=utcnow(),
        )

        result = await self.store.insert(record)

        if not result.conflict:
            self.logger.info(f"Created short URL: {hash} -> {url}")
            return self.public_view(result.record)

        existing = result.record
        self._check_same_url(existing, url)
        self.logger.debug(f"Short URL already stored: {hash}")

        if not existing.active:
            return await self.enable(existing)
        return self.public_view(existing)

    async def register_visit(self, record: UrlRecord) -> Optional[UrlRecord]:
        """Add one visit to a record.

        Visit tracking is best effort: a store failure is logged and reported
        as None so it never blocks resolution. Only active records are
        counted, so a visit racing a removal is dropped.

        Args:
            record: The record that was visited

        Returns:
            The updated record, or None if the update failed
        """
        try:
            updated = await self.store.increment_visit_counter(record.hash)
        except PersistenceError as e:
            self.logger.warning(f"Unable to register visit for {record.hash}: {e}")
            return None

        if updated is None:
            self.logger.warning(
                f"Unable to register visit, hash not found or inactive: {record.hash}"
            )
        return updated

    async def disable(self, record: UrlRecord) -> bool:
        """Logically remove a record.

        The remove token must be checked by the caller before calling this.

        Args:
            record: The record to disable

        Returns:
            True if the record is now inactive, False if it no longer exists

        Raises:
            PersistenceError: If the store fails
        """
        if not record.active:
            return True

        disabled = await self.store.update_active_state(
            record.hash,
            expected_active=True,
            active=False,
            removed_at=utcnow(),
        )

        if disabled:
            self.logger.info(f"Disabled short URL: {record.hash}")
            return True

        # Lost a race with another removal, or the record is gone
        current = await self.store.find_by_hash(record.hash)
        return current is not None and not current.active

    async def enable(self, record: UrlRecord) -> Dict[str, str]:
        """Make a removed record active again.

        Rotates the remove token, resets the visit counter to 1 and stamps a
        new creation time. The write only applies while the stored record is
        still inactive; if a concurrent caller enabled it first, that
        caller's record is returned unchanged.

        Args:
            record: The record to enable

        Returns:
            Public view of the active record

        Raises:
            PersistenceError: If the store fails or the record is gone
        """
        fields = {
            "active": True,
            "created_at": utcnow(),
            "visit_counter": 1,
            "remove_token": self.hash_generator.generate_remove_token(),
            "removed_at": None,
        }

        if await self.store.update_active_state(record.hash, expected_active=False, **fields):
            self.logger.info(f"Enabled short URL: {record.hash}")
            return self.public_view(record.copy(**fields))

        current = await self.store.find_by_hash(record.hash)
        if current is None or not current.active:
            raise PersistenceError(f"Unable to enable url {record.hash}")

        self._check_same_url(current, record.url)
        self.logger.debug(f"Short URL already enabled: {record.hash}")
        return self.public_view(current)

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        store_healthy = await self.store.health_check()
        return {
            "store": store_healthy,
            "overall": store_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        await self.hash_generator.close()

    def _validate(self, url: str) -> None:
        is_valid, error = is_valid_url(url)
        if not is_valid:
            raise InvalidUrlError(f"Invalid URL: {error}")

    @staticmethod
    def _check_same_url(record: UrlRecord, url: str) -> None:
        if record.url != url:
            raise HashCollisionError(
                f"Hash {record.hash} is already used by a different URL"
            )
