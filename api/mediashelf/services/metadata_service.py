"""Distinct-value listings of catalog fields, computed cache-aside.

Implementation notes:
- Field names resolve case-insensitively through an explicit accessor table;
  the caller's spelling is kept in the cache key.
- Cached listings are returned as stored, without re-checking live data.
  They go stale until the TTL expires or a store write invalidates them.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from mediashelf.core.config import settings
from mediashelf.core.errors import UnknownFieldError
from mediashelf.schema.media import MediaType
from mediashelf.services.cache_keys import metadata_key
from mediashelf.services.cache_service import CacheStore
from mediashelf.services.entity_store import EntityStore
from mediashelf.utils.values import distinct_values

logger = logging.getLogger("mediashelf.services.metadata")

FieldAccessor = Callable[[Any], Iterable[str | None]]

FIELD_ACCESSORS: dict[MediaType, dict[str, FieldAccessor]] = {
    MediaType.BOOKS: {
        "format": lambda book: [book.format],
        "authors": lambda book: book.authors,
        "genres": lambda book: book.genres,
        "publisher": lambda book: [book.publisher],
    },
    MediaType.MOVIES: {
        "format": lambda movie: [movie.format],
        "genres": lambda movie: movie.genres,
        "studios": lambda movie: movie.studios,
        "rating": lambda movie: [movie.rating],
    },
    MediaType.GAMES: {
        "format": lambda game: [game.format],
        "platform": lambda game: [game.platform],
        "genres": lambda game: game.genres,
        "developers": lambda game: game.developers,
        "publishers": lambda game: game.publishers,
        "rating": lambda game: [game.rating],
    },
    MediaType.MUSICS: {
        "format": lambda music: [music.format],
        "artist": lambda music: [music.artist],
        "genres": lambda music: music.genres,
        "label": lambda music: [music.label],
    },
}


def resolve_field(media_type: MediaType, field_name: str) -> FieldAccessor:
    """Return the accessor for ``field_name`` or raise ``UnknownFieldError``."""
    accessors = FIELD_ACCESSORS[media_type]
    accessor = accessors.get(field_name.strip().lower())
    if accessor is None:
        raise UnknownFieldError(media_type.value, field_name, sorted(accessors))
    return accessor


class MetadataService:
    def __init__(self, store: EntityStore, cache: CacheStore, *, ttl_seconds: int | None = None) -> None:
        self._store = store
        self._cache = cache
        self._ttl_seconds = settings.metadata_cache_ttl_seconds if ttl_seconds is None else ttl_seconds

    async def get_distinct_values(self, media_type: MediaType | str, field_name: str) -> list[str]:
        """Return the sorted distinct values of ``field_name`` across a media type."""
        kind = MediaType.parse(media_type)
        accessor = resolve_field(kind, field_name)
        cache_key = metadata_key(kind, field_name)

        cached = await self._cache.get(cache_key, list[str])
        if cached is not None:
            logger.debug("Returning cached metadata for %s", cache_key)
            return cached

        logger.debug("Cache miss for metadata %s, loading %s", cache_key, kind.value)
        entities = await self._store.list_all(kind)
        values = distinct_values(value for entity in entities for value in accessor(entity))

        await self._cache.set(cache_key, values, self._ttl_seconds)
        logger.info("Cached metadata for %s with %d distinct values", cache_key, len(values))
        return values
