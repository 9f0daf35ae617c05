"""Open Library read-API client."""

from __future__ import annotations

import logging
import re
from typing import Any

from mediashelf.core.config import settings
from mediashelf.lookup.base import BookMetadata
from mediashelf.lookup.http import fetch_json

logger = logging.getLogger("mediashelf.lookup.openlibrary")

READ_API_KINDS = frozenset({"isbn", "lccn", "oclc", "olid"})


def _names(entries: list[dict[str, Any]] | None) -> list[str]:
    return [entry["name"].strip() for entry in entries or [] if (entry.get("name") or "").strip()]


class OpenLibraryClient:
    source_name = "openlibrary"

    def __init__(self, base_url: str | None = None) -> None:
        self.base_url = (base_url or settings.openlibrary_base_url).rstrip("/")

    async def get_book(self, identifier_kind: str, value: str) -> BookMetadata | None:
        kind = identifier_kind.strip().lower()
        if kind not in READ_API_KINDS:
            raise ValueError(f"Open Library cannot look up {identifier_kind!r} identifiers")
        token = value.strip()
        if kind == "isbn":
            token = re.sub(r"[\s-]", "", token)
        if not token:
            return None

        payload = await fetch_json(
            f"{self.base_url}/api/volumes/brief/{kind}/{token}.json",
            source=self.source_name,
            operation="read",
            not_found_ok=True,
        )
        # The read API answers an empty list when nothing matches.
        if not isinstance(payload, dict):
            return None
        records = payload.get("records") or {}
        if not records:
            logger.info("Open Library has no record for %s:%s", kind, token)
            return None

        record = next(iter(records.values()))
        data = record.get("data") or {}
        details = (record.get("details") or {}).get("details") or {}
        cover = data.get("cover") or {}
        return BookMetadata(
            title=data.get("title") or "",
            subtitle=data.get("subtitle") or "",
            authors=_names(data.get("authors")),
            pages=data.get("number_of_pages"),
            publishers=_names(data.get("publishers")),
            publish_date=data.get("publish_date") or "",
            subjects=_names(data.get("subjects")),
            physical_format=details.get("physical_format") or "",
            image_url=cover.get("large") or cover.get("medium") or cover.get("small"),
        )
