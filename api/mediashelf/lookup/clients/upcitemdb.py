"""UPCitemdb barcode client."""

from __future__ import annotations

import logging
import re

from mediashelf.core.config import settings
from mediashelf.lookup.base import ProductDescriptor
from mediashelf.lookup.http import fetch_json

logger = logging.getLogger("mediashelf.lookup.upcitemdb")

BARCODE_RE = re.compile(r"^\d{12,13}$")


def normalize_barcode(value: str) -> str | None:
    """Strip spaces and dashes; return None unless 12 or 13 digits remain."""
    code = re.sub(r"[\s-]", "", value or "")
    return code if BARCODE_RE.match(code) else None


class UpcItemDbClient:
    source_name = "upcitemdb"

    def __init__(self, base_url: str | None = None, api_key: str | None = None) -> None:
        self.base_url = (base_url or settings.upcitemdb_base_url).rstrip("/")
        self.api_key = api_key or settings.upcitemdb_api_key

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json"}
        if self.api_key:
            headers["user_key"] = self.api_key
            headers["key_type"] = "3scale"
        return headers

    async def lookup_barcode(self, barcode: str) -> ProductDescriptor | None:
        code = normalize_barcode(barcode)
        if code is None:
            logger.warning("Ignoring malformed barcode %r", barcode)
            return None

        payload = await fetch_json(
            f"{self.base_url}/lookup",
            source=self.source_name,
            operation="lookup",
            headers=self._headers(),
            params={"upc": code},
            not_found_ok=True,
        )
        items = (payload or {}).get("items") or []
        if not items:
            logger.info("No product found for barcode %s", code)
            return None

        item = items[0]
        return ProductDescriptor(
            title=(item.get("title") or "").strip(),
            brand=item.get("brand") or None,
            category=item.get("category") or None,
            model=item.get("model") or None,
            isbn=item.get("isbn") or None,
            images=[url for url in item.get("images") or [] if url],
            raw_payload=item,
        )
