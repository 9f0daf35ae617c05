"""Shared helpers for service and lookup tests."""

from __future__ import annotations

from collections import Counter, deque
from typing import Any

import httpx

from mediashelf.lookup.base import (
    BookMetadata,
    GameMetadata,
    MovieMetadata,
    MusicRelease,
    ProductDescriptor,
)
from mediashelf.schema.media import CatalogEntity, MediaType
from mediashelf.services.cache_service import MemoryCacheStore
from mediashelf.services.entity_store import InMemoryEntityStore


class CountingEntityStore(InMemoryEntityStore):
    """In-memory store that records ``list_all`` calls per media type."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.list_calls: Counter[MediaType] = Counter()

    async def list_all(self, media_type: MediaType) -> list[CatalogEntity]:
        self.list_calls[media_type] += 1
        return await super().list_all(media_type)


class FailingEntityStore(CountingEntityStore):
    def __init__(self, failing: MediaType, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.failing = failing

    async def list_all(self, media_type: MediaType) -> list[CatalogEntity]:
        result = await super().list_all(media_type)
        if media_type == self.failing:
            raise RuntimeError(f"{media_type.value} store unavailable")
        return result


class CountingCacheStore(MemoryCacheStore):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.gets: list[str] = []
        self.sets: list[tuple[str, int | None]] = []

    async def get(self, key: str, value_type: Any) -> Any:
        self.gets.append(key)
        return await super().get(key, value_type)

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        self.sets.append((key, ttl_seconds))
        await super().set(key, value, ttl_seconds)


class StubProductClient:
    def __init__(self, products: dict[str, ProductDescriptor] | None = None) -> None:
        self.products = products or {}
        self.calls: list[str] = []

    async def lookup_barcode(self, barcode: str) -> ProductDescriptor | None:
        self.calls.append(barcode)
        return self.products.get(barcode)


class StubMovieClient:
    def __init__(self, result: MovieMetadata | None = None) -> None:
        self.result = result
        self.calls: list[tuple[str, int | None]] = []

    async def search_and_get_details(self, title: str, year: int | None = None) -> MovieMetadata | None:
        self.calls.append((title, year))
        return self.result


class StubBookClient:
    def __init__(self, result: BookMetadata | None = None) -> None:
        self.result = result
        self.calls: list[tuple[str, str]] = []

    async def get_book(self, identifier_kind: str, value: str) -> BookMetadata | None:
        self.calls.append((identifier_kind, value))
        return self.result


class StubGameClient:
    def __init__(self, results: list[GameMetadata] | None = None) -> None:
        self.results = results or []
        self.calls: list[str] = []

    async def search_games(self, title: str) -> list[GameMetadata]:
        self.calls.append(title)
        return list(self.results)


class StubMusicClient:
    def __init__(self, search: MusicRelease | None = None, release: MusicRelease | None = None) -> None:
        self.search = search
        self.release = release
        self.calls: list[tuple[str, str]] = []

    async def release_by_barcode(self, barcode: str) -> MusicRelease | None:
        self.calls.append(("barcode", barcode))
        return self.search

    async def release_by_id(self, release_id: str) -> MusicRelease | None:
        self.calls.append(("id", release_id))
        return self.release


def build_response(url: str, *, status: int = 200, json_data: Any | None = None, method: str = "GET") -> httpx.Response:
    request = httpx.Request(method, url)
    return httpx.Response(status_code=status, json=json_data if json_data is not None else {}, request=request)


def make_async_client(responses: deque[httpx.Response], call_log: list[dict[str, Any]]) -> type:
    """Return a stand-in for ``httpx.AsyncClient`` replaying ``responses`` in order."""

    class DummyAsyncClient:
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            self._responses = responses

        async def __aenter__(self) -> DummyAsyncClient:
            return self

        async def __aexit__(self, *args: Any) -> bool:
            return False

        def _next(self, method: str, url: str, kwargs: dict[str, Any]) -> httpx.Response:
            call_log.append({"method": method, "url": url, **kwargs})
            if not self._responses:
                raise RuntimeError("No stub responses configured")
            return self._responses.popleft()

        async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
            return self._next(method, url, kwargs)

        async def post(self, url: str, **kwargs: Any) -> httpx.Response:
            return self._next("POST", url, kwargs)

    return DummyAsyncClient
