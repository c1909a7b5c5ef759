"""Pytest configuration and fixtures."""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortener.common.logging_config import setup_logging
from shortener.dictionary import InMemoryDictionaryState
from shortener.hashing import HashGenerator
from shortener.service import ShortURLService
from shortener.store.memory import InMemoryURLStore
from shortener.views import PublicViewFormatter
from web_app import create_app

BASE_URL = "http://sho.rt"


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def store(logger):
    """Create in-memory record store."""
    return InMemoryURLStore(logger=logger)


@pytest.fixture
def formatter():
    return PublicViewFormatter(BASE_URL)


@pytest.fixture
def service(store, formatter, logger) -> ShortURLService:
    """Create service using the deterministic hash strategy."""
    return ShortURLService(
        store=store,
        formatter=formatter,
        hash_generator=HashGenerator(),
        logger=logger,
    )


@pytest.fixture
def dictionary_service(store, formatter, logger) -> ShortURLService:
    """Create service using the dictionary hash strategy."""
    return ShortURLService(
        store=store,
        formatter=formatter,
        hash_generator=HashGenerator(
            use_dictionary=True,
            dictionary_state=InMemoryDictionaryState(),
        ),
        logger=logger,
    )


@pytest.fixture
def config():
    return Config(
        store_backend="memory",
        server_protocol="http",
        server_host="sho.rt",
    )


@pytest.fixture
def app(service, config):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "http://example.com/page",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456?tab=votes#answer-1",
    ]


class YieldingURLStore(InMemoryURLStore):
    """In-memory store that hands control back to the event loop on lookups.

    Lets concurrently gathered callers all read before any of them writes.
    """

    def __init__(self, logger=None):
        super().__init__(logger=logger)
        self.insert_calls = 0

    async def find_by_hash(self, hash):
        await asyncio.sleep(0)
        return await super().find_by_hash(hash)

    async def insert(self, record):
        self.insert_calls += 1
        return await super().insert(record)


@pytest.fixture
def yielding_store(logger):
    return YieldingURLStore(logger=logger)


@pytest.fixture
def racing_service(yielding_store, formatter, logger) -> ShortURLService:
    """Create service whose store interleaves concurrent callers."""
    return ShortURLService(
        store=yielding_store,
        formatter=formatter,
        hash_generator=HashGenerator(),
        logger=logger,
    )
