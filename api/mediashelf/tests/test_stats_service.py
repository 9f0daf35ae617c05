from __future__ import annotations

import asyncio
from typing import Any

import pytest

from mediashelf.schema.media import Book, CatalogEntity, Game, MediaType, Movie, Music
from mediashelf.schema.stats import BookStats, GameStats, MovieStats, MusicStats, Stats
from mediashelf.services.cache_keys import STATS_KEY
from mediashelf.services.stats_service import StatsService
from mediashelf.tests.utils import CountingEntityStore, FailingEntityStore


async def _seed_catalog(store) -> None:
    await store.create_many(
        MediaType.BOOKS,
        [
            Book(title="A", format="Hardcover", authors=["Ann", "Bob"], pages=100),
            Book(title="B", format=" Hardcover ", authors=["Ann"], pages=None),
            Book(title="C", format="", authors=[], pages=50),
        ],
    )
    await store.create_many(
        MediaType.MOVIES,
        [
            Movie(title="Film", format="DVD", is_tv_series=False),
            Movie(title="Show", format="Blu-ray", is_tv_series=True),
        ],
    )
    await store.create_many(
        MediaType.GAMES,
        [
            Game(title="G1", format="Cartridge", platform="Nintendo Switch"),
            Game(title="G2", format="Disc", platform="PlayStation 5"),
            Game(title="G3", format="Disc", platform="Nintendo Switch"),
        ],
    )
    await store.create_many(
        MediaType.MUSICS,
        [
            Music(title="M1", format="CD", artist="Band", tracks=10),
            Music(title="M2", format="Vinyl", artist="Band", tracks=None),
        ],
    )


@pytest.mark.asyncio
async def test_stats_summarize_every_media_type(store, cache) -> None:
    await _seed_catalog(store)
    service = StatsService(store, cache)

    stats = await service.get_stats()

    assert stats.book_stats.total == 3
    assert stats.book_stats.formats == ["Hardcover"]
    assert stats.book_stats.total_formats == 1
    assert stats.book_stats.unique_authors == 2
    assert stats.book_stats.total_pages == 150
    assert stats.movie_stats.total == 2
    assert stats.movie_stats.total_tv_series == 1
    assert stats.movie_stats.formats == ["Blu-ray", "DVD"]
    assert stats.game_stats.total_platforms == 2
    assert stats.game_stats.platforms == ["Nintendo Switch", "PlayStation 5"]
    assert stats.music_stats.unique_artists == 1
    assert stats.music_stats.total_tracks == 10


@pytest.mark.asyncio
async def test_stats_miss_fetches_each_media_type_once_and_caches(store, cache) -> None:
    await _seed_catalog(store)
    service = StatsService(store, cache, ttl_seconds=300)

    first = await service.get_stats()
    second = await service.get_stats()

    assert first == second
    assert {media_type: store.list_calls[media_type] for media_type in MediaType} == {
        media_type: 1 for media_type in MediaType
    }
    assert cache.sets == [(STATS_KEY, 300)]


@pytest.mark.asyncio
async def test_stats_hit_skips_store(store, cache) -> None:
    cached = Stats(
        book_stats=BookStats(total=42),
        movie_stats=MovieStats(),
        game_stats=GameStats(),
        music_stats=MusicStats(),
    )
    await cache.set(STATS_KEY, cached)
    service = StatsService(store, cache)

    stats = await service.get_stats()

    assert stats.book_stats.total == 42
    assert sum(store.list_calls.values()) == 0


@pytest.mark.asyncio
async def test_stats_over_empty_catalog(store, cache) -> None:
    stats = await StatsService(store, cache).get_stats()

    assert stats.book_stats == BookStats()
    assert stats.music_stats.total_tracks == 0


@pytest.mark.asyncio
async def test_stats_failure_leaves_cache_untouched(cache) -> None:
    store = FailingEntityStore(MediaType.GAMES, cache)
    service = StatsService(store, cache)

    with pytest.raises(RuntimeError):
        await service.get_stats()

    assert cache.sets == []
    assert await cache.get(STATS_KEY, Stats) is None


@pytest.mark.asyncio
async def test_store_write_invalidates_cached_stats(store, cache) -> None:
    service = StatsService(store, cache)
    assert (await service.get_stats()).movie_stats.total == 0

    await store.create(MediaType.MOVIES, Movie(title="New"))

    assert (await service.get_stats()).movie_stats.total == 1


class RendezvousEntityStore(CountingEntityStore):
    """Holds every ``list_all`` call until all four media types are loading."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.all_started = asyncio.Event()

    async def list_all(self, media_type: MediaType) -> list[CatalogEntity]:
        self.list_calls[media_type] += 1
        if len(self.list_calls) == len(MediaType):
            self.all_started.set()
        await self.all_started.wait()
        return await super(CountingEntityStore, self).list_all(media_type)


class StalledSiblingsEntityStore(CountingEntityStore):
    """Fails one media type once the others are blocked on a load that never finishes."""

    def __init__(self, failing: MediaType, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.failing = failing
        self.siblings_waiting = asyncio.Event()
        self.never_released = asyncio.Event()
        self.cancelled: list[MediaType] = []

    async def list_all(self, media_type: MediaType) -> list[CatalogEntity]:
        self.list_calls[media_type] += 1
        if media_type == self.failing:
            await self.siblings_waiting.wait()
            raise RuntimeError(f"{media_type.value} store unavailable")
        if len(self.list_calls) == len(MediaType):
            self.siblings_waiting.set()
        try:
            await self.never_released.wait()
        except asyncio.CancelledError:
            self.cancelled.append(media_type)
            raise
        return await super(CountingEntityStore, self).list_all(media_type)


@pytest.mark.asyncio
async def test_stats_loads_media_types_concurrently(cache) -> None:
    store = RendezvousEntityStore(cache)
    await store.create(MediaType.GAMES, Game(title="G1", platform="PC"))

    stats = await asyncio.wait_for(StatsService(store, cache).get_stats(), timeout=1)

    assert store.all_started.is_set()
    assert stats.game_stats.total == 1
    assert [key for key, _ in cache.sets] == [STATS_KEY]


@pytest.mark.asyncio
async def test_stats_failure_cancels_pending_loads(cache) -> None:
    store = StalledSiblingsEntityStore(MediaType.BOOKS, cache)

    with pytest.raises(RuntimeError, match="books store unavailable"):
        await asyncio.wait_for(StatsService(store, cache).get_stats(), timeout=1)

    assert sorted(store.cancelled) == sorted([MediaType.MOVIES, MediaType.GAMES, MediaType.MUSICS])
    assert cache.sets == []
