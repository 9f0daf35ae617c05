"""Cache stores used by the aggregation services.

A cache ``get`` returns ``None`` on a miss; any other value, including an
empty list, is a hit. Keys are namespaced by callers.
"""

from __future__ import annotations

import copy
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from pydantic import TypeAdapter
from pydantic_core import to_json
from redis.asyncio import Redis

from mediashelf.core.config import Settings, settings
from mediashelf.utils.redaction import redact_secrets

logger = logging.getLogger("mediashelf.services.cache")

T = TypeVar("T")


class CacheStore(Protocol):
    async def get(self, key: str, value_type: type[T]) -> T | None: ...

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def remove_by_pattern(self, pattern: str) -> int: ...


def _pattern_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a ``*`` wildcard pattern into an anchored regex."""
    return re.compile("^" + re.escape(pattern).replace(r"\*", ".*") + "$", re.IGNORECASE)


@dataclass(slots=True)
class _Entry:
    value: Any
    expires_at: float | None


class MemoryCacheStore:
    """Process-local cache with absolute per-entry expiry.

    Values are deep-copied on the way in and out, so callers never share
    the cached object.
    """

    def __init__(self, *, enabled: bool = True, default_ttl_seconds: int = 600) -> None:
        self.enabled = enabled
        self.default_ttl_seconds = default_ttl_seconds
        self._entries: dict[str, _Entry] = {}

    def _now(self) -> float:
        return time.monotonic()

    async def get(self, key: str, value_type: type[T]) -> T | None:
        if not self.enabled:
            return None
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss for key: %s", key)
            return None
        if entry.expires_at is not None and self._now() >= entry.expires_at:
            self._entries.pop(key, None)
            logger.debug("Cache entry expired: %s", key)
            return None
        logger.debug("Cache hit for key: %s", key)
        return copy.deepcopy(entry.value)

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        if not self.enabled:
            return
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        expires_at = self._now() + ttl if ttl > 0 else None
        self._entries[key] = _Entry(value=copy.deepcopy(value), expires_at=expires_at)
        logger.debug("Cached value for key: %s with ttl: %ss", key, ttl)

    async def remove(self, key: str) -> None:
        self._entries.pop(key, None)
        logger.info("Removed cache entry for key: %s", key)

    async def remove_by_pattern(self, pattern: str) -> int:
        regex = _pattern_to_regex(pattern)
        doomed = [key for key in self._entries if regex.match(key)]
        for key in doomed:
            self._entries.pop(key, None)
        logger.info("Removed %d cache entries matching pattern: %s", len(doomed), pattern)
        return len(doomed)


class RedisCacheStore:
    """Redis-backed cache sharing entries across API processes.

    Values are stored as JSON and re-validated into ``value_type`` on read,
    so pydantic models round-trip without custom codecs.
    """

    def __init__(self, client: Redis, *, enabled: bool = True, default_ttl_seconds: int = 600) -> None:
        self._client = client
        self.enabled = enabled
        self.default_ttl_seconds = default_ttl_seconds

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> RedisCacheStore:
        logger.info("Using redis cache at %s", redact_secrets(url))
        return cls(Redis.from_url(url), **kwargs)

    async def get(self, key: str, value_type: type[T]) -> T | None:
        if not self.enabled:
            return None
        raw = await self._client.get(key)
        if raw is None:
            logger.debug("Cache miss for key: %s", key)
            return None
        logger.debug("Cache hit for key: %s", key)
        return TypeAdapter(value_type).validate_json(raw)

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        if not self.enabled:
            return
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        await self._client.set(key, to_json(value), ex=ttl if ttl > 0 else None)
        logger.debug("Cached value for key: %s with ttl: %ss", key, ttl)

    async def remove(self, key: str) -> None:
        await self._client.delete(key)
        logger.info("Removed cache entry for key: %s", key)

    async def remove_by_pattern(self, pattern: str) -> int:
        keys = [key async for key in self._client.scan_iter(match=pattern)]
        if keys:
            await self._client.delete(*keys)
        logger.info("Removed %d cache entries matching pattern: %s", len(keys), pattern)
        return len(keys)

    async def close(self) -> None:
        await self._client.aclose()


def build_cache_store(config: Settings | None = None) -> CacheStore:
    """Return the cache backend selected by ``cache_backend``."""
    active = config or settings
    options = {"enabled": active.enable_caching, "default_ttl_seconds": active.default_cache_ttl_seconds}
    if active.cache_backend == "redis":
        return RedisCacheStore.from_url(active.redis_url, **options)
    return MemoryCacheStore(**options)
