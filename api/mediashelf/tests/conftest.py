"""Shared pytest fixtures for service, lookup and route tests."""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mediashelf.api.deps import get_cache_store, get_dispatcher, get_entity_store
from mediashelf.lookup import LookupDispatcher
from mediashelf.lookup.observability import lookup_monitor
from mediashelf.main import app
from mediashelf.tests.utils import CountingCacheStore, CountingEntityStore


@pytest.fixture()
def cache() -> CountingCacheStore:
    return CountingCacheStore(default_ttl_seconds=600)


@pytest.fixture()
def store(cache: CountingCacheStore) -> CountingEntityStore:
    return CountingEntityStore(cache)


@pytest.fixture()
def dispatcher() -> LookupDispatcher:
    return LookupDispatcher([])


@pytest_asyncio.fixture(autouse=True)
async def _reset_lookup_monitor():
    await lookup_monitor.reset()
    yield
    await lookup_monitor.reset()


@pytest_asyncio.fixture()
async def client(
    cache: CountingCacheStore,
    store: CountingEntityStore,
    dispatcher: LookupDispatcher,
) -> AsyncClient:
    app.dependency_overrides[get_cache_store] = lambda: cache
    app.dependency_overrides[get_entity_store] = lambda: store
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()
