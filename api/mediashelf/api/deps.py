from functools import lru_cache

from fastapi import Depends, HTTPException, status

from mediashelf.core.config import settings
from mediashelf.core.errors import UnknownMediaTypeError
from mediashelf.lookup import LookupDispatcher, build_dispatcher
from mediashelf.schema.media import MediaType
from mediashelf.services.cache_service import CacheStore, build_cache_store
from mediashelf.services.entity_store import EntityStore, InMemoryEntityStore
from mediashelf.services.metadata_service import MetadataService
from mediashelf.services.stats_service import StatsService


@lru_cache
def get_cache_store() -> CacheStore:
    return build_cache_store(settings)


@lru_cache
def get_entity_store() -> EntityStore:
    return InMemoryEntityStore(get_cache_store())


@lru_cache
def get_dispatcher() -> LookupDispatcher:
    return build_dispatcher(settings)


def get_metadata_service(
    store: EntityStore = Depends(get_entity_store),
    cache: CacheStore = Depends(get_cache_store),
) -> MetadataService:
    return MetadataService(store, cache)


def get_stats_service(
    store: EntityStore = Depends(get_entity_store),
    cache: CacheStore = Depends(get_cache_store),
) -> StatsService:
    return StatsService(store, cache)


def get_media_type(media_type: str) -> MediaType:
    """Resolve the ``media_type`` path parameter or answer 400."""
    try:
        return MediaType.parse(media_type)
    except UnknownMediaTypeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
