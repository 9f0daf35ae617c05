"""Cache key layout shared by the aggregators and the entity store.

Keys are ``metadata:{Kind}:{Field}`` and the literal ``stats``.
"""

from __future__ import annotations

from mediashelf.schema.media import MediaType
from mediashelf.services.cache_service import CacheStore

STATS_KEY = "stats"


def metadata_key(media_type: MediaType, field_name: str) -> str:
    return f"metadata:{media_type.key_name}:{field_name}"


async def invalidate_catalog_caches(cache: CacheStore, media_type: MediaType) -> None:
    """Drop every cached aggregate derived from ``media_type`` entities."""
    await cache.remove_by_pattern(metadata_key(media_type, "*"))
    await cache.remove(STATS_KEY)
