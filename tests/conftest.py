"""Shared fixtures for catalog tests."""

import pytest
import pytest_asyncio
from fakeredis import FakeServer, aioredis

from products_service.domain.repositories.kv_store import KeyValueStore
from products_service.domain.repositories.product_repo import ProductRepo

from tests.fakes import FakeSearchIndex


@pytest_asyncio.fixture
async def redis_client():
    """Fresh, isolated in-memory Redis (no search module), raw bytes like production."""
    client = aioredis.FakeRedis(server=FakeServer(), decode_responses=False)
    yield client
    await client.aclose()


@pytest.fixture
def store(redis_client) -> KeyValueStore:
    return KeyValueStore(redis_client)


@pytest.fixture
def repo(store: KeyValueStore) -> ProductRepo:
    """Repository with the search index disabled (scan path only)."""
    return ProductRepo(store, scan_batch_size=7)


@pytest.fixture
def search_index() -> FakeSearchIndex:
    return FakeSearchIndex()


@pytest.fixture
def indexed_repo(store: KeyValueStore, search_index: FakeSearchIndex) -> ProductRepo:
    """Repository whose text queries go through the fake search index."""
    return ProductRepo(store, search_index, scan_batch_size=7)
