from __future__ import annotations

import pytest

from mediashelf.core.errors import UnknownFieldError, UnknownMediaTypeError, UsageError
from mediashelf.schema.media import Book, MediaType, Movie, Music
from mediashelf.services.metadata_service import MetadataService


async def _seed_books(store, formats: list[str | None]) -> None:
    await store.create_many(MediaType.BOOKS, [Book(title=f"Book {i}", format=fmt) for i, fmt in enumerate(formats)])


@pytest.mark.asyncio
async def test_distinct_formats_are_sorted_and_deduplicated(store, cache) -> None:
    await _seed_books(store, ["Hardcover", "Paperback", "Hardcover", "eBook"])
    service = MetadataService(store, cache)

    values = await service.get_distinct_values(MediaType.BOOKS, "Format")

    assert values == ["Hardcover", "Paperback", "eBook"]


@pytest.mark.asyncio
async def test_blank_values_are_excluded(store, cache) -> None:
    await _seed_books(store, ["Hardcover", "", "   ", "Paperback", None])
    service = MetadataService(store, cache)

    assert await service.get_distinct_values(MediaType.BOOKS, "Format") == ["Hardcover", "Paperback"]


@pytest.mark.asyncio
async def test_values_are_trimmed_before_deduplication(store, cache) -> None:
    await _seed_books(store, [" Hardcover", "Hardcover  ", "hardcover"])
    service = MetadataService(store, cache)

    assert await service.get_distinct_values(MediaType.BOOKS, "format") == ["Hardcover", "hardcover"]


@pytest.mark.asyncio
async def test_field_names_resolve_case_insensitively(store, cache) -> None:
    await _seed_books(store, ["Hardcover", "Paperback"])
    service = MetadataService(store, cache)

    results = [await service.get_distinct_values(MediaType.BOOKS, name) for name in ("Format", "format", "FORMAT")]

    assert results[0] == results[1] == results[2] == ["Hardcover", "Paperback"]


@pytest.mark.asyncio
async def test_multi_value_fields_are_flattened(store, cache) -> None:
    await store.create_many(
        MediaType.MOVIES,
        [
            Movie(title="A", genres=["Drama", "Action"]),
            Movie(title="B", genres=["Action", " Comedy "]),
            Movie(title="C"),
        ],
    )
    service = MetadataService(store, cache)

    assert await service.get_distinct_values("movies", "Genres") == ["Action", "Comedy", "Drama"]


@pytest.mark.asyncio
async def test_cache_hit_skips_store(store, cache) -> None:
    await _seed_books(store, ["Hardcover"])
    service = MetadataService(store, cache)
    await cache.set("metadata:Books:Format", ["Cached"])
    cache.sets.clear()

    values = await service.get_distinct_values(MediaType.BOOKS, "Format")

    assert values == ["Cached"]
    assert store.list_calls[MediaType.BOOKS] == 0
    assert cache.sets == []


@pytest.mark.asyncio
async def test_cached_empty_list_is_a_hit(store, cache) -> None:
    await _seed_books(store, ["Hardcover"])
    service = MetadataService(store, cache)
    await cache.set("metadata:Books:Format", [])

    assert await service.get_distinct_values(MediaType.BOOKS, "Format") == []
    assert store.list_calls[MediaType.BOOKS] == 0


@pytest.mark.asyncio
async def test_cache_miss_fetches_once_and_populates_with_ttl(store, cache) -> None:
    await store.create_many(MediaType.MUSICS, [Music(title="A", artist="Band"), Music(title="B", artist="Solo")])
    service = MetadataService(store, cache, ttl_seconds=120)

    first = await service.get_distinct_values(MediaType.MUSICS, "Artist")
    second = await service.get_distinct_values(MediaType.MUSICS, "Artist")

    assert first == second == ["Band", "Solo"]
    assert store.list_calls[MediaType.MUSICS] == 1
    assert cache.sets == [("metadata:Musics:Artist", 120)]
    assert cache.gets == ["metadata:Musics:Artist", "metadata:Musics:Artist"]


@pytest.mark.asyncio
async def test_cache_key_keeps_caller_spelling(store, cache) -> None:
    service = MetadataService(store, cache)

    await service.get_distinct_values(MediaType.GAMES, "platform")

    assert cache.sets[0][0] == "metadata:Games:platform"


@pytest.mark.asyncio
async def test_unknown_field_is_a_usage_error(store, cache) -> None:
    service = MetadataService(store, cache)

    with pytest.raises(UnknownFieldError) as excinfo:
        await service.get_distinct_values(MediaType.BOOKS, "Runtime")

    assert isinstance(excinfo.value, UsageError)
    assert cache.gets == []
    assert store.list_calls[MediaType.BOOKS] == 0


@pytest.mark.asyncio
async def test_unknown_media_type_is_a_usage_error(store, cache) -> None:
    service = MetadataService(store, cache)

    with pytest.raises(UnknownMediaTypeError):
        await service.get_distinct_values("vinyl", "Format")


@pytest.mark.asyncio
async def test_store_write_invalidates_cached_listing(store, cache) -> None:
    await _seed_books(store, ["Hardcover"])
    service = MetadataService(store, cache)
    assert await service.get_distinct_values(MediaType.BOOKS, "Format") == ["Hardcover"]

    await _seed_books(store, ["Paperback"])

    assert await service.get_distinct_values(MediaType.BOOKS, "Format") == ["Hardcover", "Paperback"]
    assert store.list_calls[MediaType.BOOKS] == 2


@pytest.mark.asyncio
async def test_mutating_returned_values_leaves_cached_listing_intact(store, cache) -> None:
    await _seed_books(store, ["Hardcover", "Paperback"])
    service = MetadataService(store, cache)

    first = await service.get_distinct_values(MediaType.BOOKS, "Format")
    first.append("Mutated")
    second = await service.get_distinct_values(MediaType.BOOKS, "Format")

    assert second == ["Hardcover", "Paperback"]
    assert store.list_calls[MediaType.BOOKS] == 1
