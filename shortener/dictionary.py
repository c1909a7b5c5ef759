"""State containers for the dictionary hashing strategy.

The dictionary strategy gives every distinct protocol, domain and path value a
short sequential identifier. The mapping must be shared by every request, so it
lives in an explicitly owned container that is injected into ``HashGenerator``.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

import redis.asyncio as redis

COMPONENT_CLASSES = ("protocol", "domain", "path")

# Identifiers 0x0-0xf are reserved, every issued identifier has two or more digits
FIRST_IDENTIFIER = 0x10


def format_identifier(number: int) -> str:
    return format(number, "x")


class DictionaryState(ABC):
    """Mapping of component values to identifiers, one mapping per component class."""

    @abstractmethod
    async def identifier_for(self, component: str, value: str) -> str:
        """Get the identifier of a component value, assigning one on first use.

        Args:
            component: One of ``protocol``, ``domain`` or ``path``
            value: The component value

        Returns:
            Hexadecimal identifier
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the container."""
        pass


def _check_component(component: str) -> None:
    if component not in COMPONENT_CLASSES:
        raise ValueError(f"Unknown URL component class: {component}")


class InMemoryDictionaryState(DictionaryState):
    """Process-local dictionary state.

    Lookup-or-assign runs under one lock per component class, so two callers
    racing on the same unseen value always get the same identifier. The state
    is not persisted: a restart starts counting from ``FIRST_IDENTIFIER`` again
    and previously issued dictionary hashes may be handed out for other URLs.
    """

    def __init__(self):
        self._maps: Dict[str, Dict[str, str]] = {c: {} for c in COMPONENT_CLASSES}
        self._counters: Dict[str, int] = {c: FIRST_IDENTIFIER for c in COMPONENT_CLASSES}
        self._locks: Dict[str, threading.Lock] = {c: threading.Lock() for c in COMPONENT_CLASSES}

    async def identifier_for(self, component: str, value: str) -> str:
        _check_component(component)

        with self._locks[component]:
            mapping = self._maps[component]
            identifier = mapping.get(value)
            if identifier is None:
                identifier = format_identifier(self._counters[component])
                self._counters[component] += 1
                mapping[value] = identifier
            return identifier

    def size(self, component: str) -> int:
        """Number of distinct values seen for a component class."""
        _check_component(component)
        return len(self._maps[component])


class RedisDictionaryState(DictionaryState):
    """Dictionary state persisted in Redis.

    Each component class owns a hash (value -> identifier) and a counter.
    ``INCR`` hands out numbers and ``HSETNX`` makes the first writer win, so
    concurrent processes agree on identifiers and restarts keep them.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        client: Optional[redis.Redis] = None,
        key_prefix: str = "shortener:dict",
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis dictionary state.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            client: Already connected client, used instead of ``redis_url``
            key_prefix: Prefix for all keys written by this container
            logger: Optional logger instance
        """
        if client is None and redis_url is None:
            raise ValueError("Either redis_url or client is required")

        self.redis_url = redis_url
        self.client = client
        self.key_prefix = key_prefix
        self.logger = logger or logging.getLogger(__name__)

    async def connect(self) -> None:
        """Connect to Redis."""
        if self.client is None:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        await self.client.ping()
        self.logger.info("Connected to Redis dictionary state")

    def map_key(self, component: str) -> str:
        return f"{self.key_prefix}:{component}:map"

    def counter_key(self, component: str) -> str:
        return f"{self.key_prefix}:{component}:counter"

    async def identifier_for(self, component: str, value: str) -> str:
        _check_component(component)
        if self.client is None:
            await self.connect()

        map_key = self.map_key(component)
        identifier = await self.client.hget(map_key, value)
        if identifier is not None:
            return identifier

        # INCR starts at 1
        number = await self.client.incr(self.counter_key(component))
        candidate = format_identifier(number + FIRST_IDENTIFIER - 1)

        if await self.client.hsetnx(map_key, value, candidate):
            self.logger.debug(f"Assigned {component} identifier {candidate} to {value!r}")
            return candidate

        # Another writer assigned this value first; its identifier wins
        return await self.client.hget(map_key, value)

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.logger.info("Redis connection closed")
