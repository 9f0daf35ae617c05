"""MusicBrainz web-service client, throttled to one request per second."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from mediashelf.core.config import settings
from mediashelf.lookup.base import MusicRelease, ReleaseMedium, ReleaseTrack
from mediashelf.lookup.http import fetch_json

logger = logging.getLogger("mediashelf.lookup.musicbrainz")


def parse_release(payload: dict[str, Any]) -> MusicRelease:
    artists = []
    for credit in payload.get("artist-credit") or []:
        name = credit.get("name") or (credit.get("artist") or {}).get("name")
        if name:
            artists.append(name)
    media = []
    for medium in payload.get("media") or []:
        tracks = [
            ReleaseTrack(
                number=str(track.get("number") or track.get("position") or ""),
                title=track.get("title") or (track.get("recording") or {}).get("title") or "",
                length_ms=track.get("length") or (track.get("recording") or {}).get("length"),
            )
            for track in medium.get("tracks") or []
        ]
        media.append(
            ReleaseMedium(
                format=medium.get("format") or "",
                track_count=medium.get("track-count") or len(tracks),
                tracks=tracks,
            )
        )
    return MusicRelease(
        id=payload.get("id") or "",
        title=payload.get("title") or "",
        date=payload.get("date") or "",
        artists=artists,
        tags=[(tag["name"], tag.get("count") or 0) for tag in payload.get("tags") or [] if tag.get("name")],
        labels=[
            info["label"]["name"]
            for info in payload.get("label-info") or []
            if (info.get("label") or {}).get("name")
        ],
        media=media,
    )


class MusicBrainzClient:
    source_name = "musicbrainz"
    _min_interval_seconds = 1.0

    def __init__(self, base_url: str | None = None, user_agent: str | None = None) -> None:
        self.base_url = (base_url or settings.musicbrainz_base_url).rstrip("/")
        self.user_agent = user_agent or settings.musicbrainz_user_agent
        self._lock = asyncio.Lock()
        self._last_request_at: float | None = None

    async def _get(self, path: str, params: dict[str, str], operation: str) -> Any:
        """Serialize requests and space them at least ``_min_interval_seconds`` apart."""
        async with self._lock:
            if self._last_request_at is not None:
                wait = self._min_interval_seconds - (time.monotonic() - self._last_request_at)
                if wait > 0:
                    await asyncio.sleep(wait)
            try:
                return await fetch_json(
                    f"{self.base_url}{path}",
                    source=self.source_name,
                    operation=operation,
                    headers={"accept": "application/json", "User-Agent": self.user_agent},
                    params={**params, "fmt": "json"},
                    not_found_ok=True,
                )
            finally:
                self._last_request_at = time.monotonic()

    async def release_by_barcode(self, barcode: str) -> MusicRelease | None:
        payload = await self._get("/ws/2/release/", {"query": f"barcode:{barcode.strip()}"}, "search_barcode")
        releases = (payload or {}).get("releases") or []
        if not releases:
            logger.info("No MusicBrainz release for barcode %s", barcode)
            return None
        return parse_release(releases[0])

    async def release_by_id(self, release_id: str) -> MusicRelease | None:
        payload = await self._get(
            f"/ws/2/release/{release_id}",
            {"inc": "artist-credits+labels+recordings+tags"},
            "release",
        )
        if not payload:
            return None
        return parse_release(payload)
