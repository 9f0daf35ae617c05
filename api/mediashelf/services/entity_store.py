"""Entity store contract plus the in-process implementation the API runs on."""

from __future__ import annotations

import logging
import uuid
from typing import Iterable, Protocol

from mediashelf.schema.media import ENTITY_MODELS, CatalogEntity, MediaType
from mediashelf.services.cache_keys import invalidate_catalog_caches
from mediashelf.services.cache_service import CacheStore

logger = logging.getLogger("mediashelf.services.entity_store")


class EntityStore(Protocol):
    async def list_all(self, media_type: MediaType) -> list[CatalogEntity]: ...

    async def get(self, media_type: MediaType, entity_id: str) -> CatalogEntity | None: ...

    async def create(self, media_type: MediaType, entity: CatalogEntity) -> CatalogEntity: ...

    async def update(self, media_type: MediaType, entity_id: str, entity: CatalogEntity) -> CatalogEntity | None: ...

    async def delete(self, media_type: MediaType, entity_id: str) -> bool: ...


def _check_model(media_type: MediaType, entity: CatalogEntity) -> None:
    expected = ENTITY_MODELS[media_type]
    if not isinstance(entity, expected):
        raise TypeError(f"{media_type.value} store expects {expected.__name__}, got {type(entity).__name__}")


class InMemoryEntityStore:
    """Dict-backed store keyed by media type and opaque string id.

    Writes invalidate the cached metadata listings of the affected media
    type and the global stats entry when a cache store is attached.
    """

    def __init__(self, cache: CacheStore | None = None) -> None:
        self._cache = cache
        self._items: dict[MediaType, dict[str, CatalogEntity]] = {media_type: {} for media_type in MediaType}

    async def list_all(self, media_type: MediaType) -> list[CatalogEntity]:
        return list(self._items[media_type].values())

    async def get(self, media_type: MediaType, entity_id: str) -> CatalogEntity | None:
        return self._items[media_type].get(entity_id)

    async def create(self, media_type: MediaType, entity: CatalogEntity) -> CatalogEntity:
        _check_model(media_type, entity)
        stored = entity.model_copy(update={"id": uuid.uuid4().hex})
        self._items[media_type][stored.id] = stored
        await self._invalidate(media_type)
        return stored

    async def create_many(self, media_type: MediaType, entities: Iterable[CatalogEntity]) -> list[CatalogEntity]:
        created = [await self.create(media_type, entity) for entity in entities]
        logger.info("Imported %d %s", len(created), media_type.value)
        return created

    async def update(self, media_type: MediaType, entity_id: str, entity: CatalogEntity) -> CatalogEntity | None:
        _check_model(media_type, entity)
        if entity_id not in self._items[media_type]:
            return None
        stored = entity.model_copy(update={"id": entity_id})
        self._items[media_type][entity_id] = stored
        await self._invalidate(media_type)
        return stored

    async def delete(self, media_type: MediaType, entity_id: str) -> bool:
        removed = self._items[media_type].pop(entity_id, None)
        if removed is None:
            return False
        await self._invalidate(media_type)
        return True

    async def _invalidate(self, media_type: MediaType) -> None:
        if self._cache is not None:
            await invalidate_catalog_caches(self._cache, media_type)
