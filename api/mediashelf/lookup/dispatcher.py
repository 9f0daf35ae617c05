"""Route a (media type, identifier kind, value) lookup to the first capable strategy.

Invariants:
- The strategy list is fixed at construction; order decides ties.
- A missing strategy and a strategy miss both resolve to None.
- Client exceptions propagate unchanged and nothing is cached here.
"""

from __future__ import annotations

import logging
from typing import Iterable

from mediashelf.core.errors import UnknownMediaTypeError
from mediashelf.lookup.base import LookupStrategy
from mediashelf.schema.lookup import LookupResponse
from mediashelf.schema.media import MediaType

logger = logging.getLogger("mediashelf.lookup.dispatcher")


class LookupDispatcher:
    def __init__(self, strategies: Iterable[LookupStrategy]) -> None:
        self._strategies: tuple[LookupStrategy, ...] = tuple(strategies)

    @property
    def strategies(self) -> tuple[LookupStrategy, ...]:
        return self._strategies

    def select(self, media_type: MediaType, identifier_kind: str) -> LookupStrategy | None:
        for strategy in self._strategies:
            if strategy.media_type == media_type and strategy.supports_identifier_kind(identifier_kind):
                return strategy
        return None

    async def resolve(
        self,
        media_type: MediaType | str,
        identifier_kind: str,
        value: str,
    ) -> LookupResponse | None:
        try:
            kind = MediaType.parse(media_type)
        except UnknownMediaTypeError:
            logger.warning("No lookup strategy for unknown media type %r", media_type)
            return None

        strategy = self.select(kind, identifier_kind)
        if strategy is None:
            logger.warning("No lookup strategy for %s by %s", kind.value, identifier_kind)
            return None

        logger.info("Looking up %s by %s %s with %s", kind.value, identifier_kind, value, type(strategy).__name__)
        return await strategy.lookup(identifier_kind.strip().lower(), value.strip())
