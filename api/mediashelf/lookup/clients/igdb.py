"""IGDB client for game metadata lookups."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from mediashelf.core.config import settings
from mediashelf.lookup.base import GameMetadata
from mediashelf.lookup.http import ExternalAPIError
from mediashelf.lookup.observability import lookup_monitor

logger = logging.getLogger("mediashelf.lookup.igdb")

SEARCH_FIELDS = (
    "name,summary,first_release_date,cover.url,genres.name,platforms.name,"
    "involved_companies.company.name,involved_companies.developer,involved_companies.publisher,"
    "age_ratings.category,age_ratings.rating"
)

AGE_RATING_BOARDS = {1: "ESRB", 2: "PEGI"}
AGE_RATING_LABELS = {
    1: "3",
    2: "7",
    3: "12",
    4: "16",
    5: "18",
    6: "RP",
    7: "EC",
    8: "E",
    9: "E10+",
    10: "T",
    11: "M",
    12: "AO",
}


def fix_cover_url(url: str | None) -> str | None:
    """Make protocol-relative cover URLs absolute and request the large size."""
    if not url:
        return None
    if url.startswith("//"):
        url = f"https:{url}"
    return url.replace("t_thumb", "t_cover_big")


def _age_ratings(entries: list[dict[str, Any]] | None) -> list[str]:
    ratings: list[str] = []
    for entry in entries or []:
        board = AGE_RATING_BOARDS.get(entry.get("category"))
        label = AGE_RATING_LABELS.get(entry.get("rating"))
        if board and label:
            ratings.append(f"{board} {label}")
    return ratings


def parse_game(payload: dict[str, Any]) -> GameMetadata:
    release_stamp = payload.get("first_release_date")
    release_date = ""
    if release_stamp:
        release_date = datetime.fromtimestamp(release_stamp, tz=timezone.utc).date().isoformat()
    companies = payload.get("involved_companies", [])
    return GameMetadata(
        title=payload.get("name") or "",
        genres=[genre.get("name") for genre in payload.get("genres", []) if genre.get("name")],
        developers=[c.get("company", {}).get("name") for c in companies if c.get("developer") and c.get("company")],
        publishers=[c.get("company", {}).get("name") for c in companies if c.get("publisher") and c.get("company")],
        platforms=[platform.get("name") for platform in payload.get("platforms", []) if platform.get("name")],
        release_date=release_date,
        ratings=_age_ratings(payload.get("age_ratings")),
        summary=payload.get("summary") or "",
        image_url=fix_cover_url((payload.get("cover") or {}).get("url")),
    )


@dataclass(slots=True)
class AccessToken:
    value: str
    expires_at: datetime

    def is_usable(self, now: datetime, margin: timedelta) -> bool:
        return now + margin < self.expires_at


class IgdbClient:
    """IGDB v4 client authenticated with a Twitch client-credentials token."""

    source_name = "igdb"
    _token_url = "https://id.twitch.tv/oauth2/token"
    _game_url = "https://api.igdb.com/v4/games"
    _token_margin = timedelta(seconds=30)
    _fallback_token_lifetime = 60

    def __init__(self, client_id: str | None = None, client_secret: str | None = None) -> None:
        self.client_id = client_id or settings.igdb_client_id
        self.client_secret = client_secret or settings.igdb_client_secret
        self._token: AccessToken | None = None

    def _utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    async def _ensure_token(self, force_refresh: bool = False) -> str:
        """Return a usable bearer token, requesting a new one when needed."""
        if not (self.client_id and self.client_secret):
            raise ExternalAPIError("IGDB credentials missing; set IGDB_CLIENT_ID and IGDB_CLIENT_SECRET")
        if self._token is not None and not force_refresh and self._token.is_usable(self._utcnow(), self._token_margin):
            return self._token.value

        async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
            response = await client.post(
                self._token_url,
                params={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": "client_credentials",
                },
            )
        response.raise_for_status()
        grant = response.json()
        if not grant.get("access_token"):
            raise ExternalAPIError("Twitch token endpoint returned no access_token")
        try:
            lifetime = int(grant.get("expires_in") or 0)
        except (TypeError, ValueError):
            lifetime = 0
        lifetime = lifetime if lifetime > 0 else self._fallback_token_lifetime
        self._token = AccessToken(grant["access_token"], self._utcnow() + timedelta(seconds=lifetime))
        logger.debug("Fetched IGDB token valid for %d seconds", lifetime)
        return self._token.value

    async def _query(self, content: str) -> list[dict[str, Any]]:
        """POST an Apicalypse query; a 401 drops the token and retries once."""
        response = await self._post_query(content, await self._ensure_token())
        if response.status_code == 401:
            self._token = None
            response = await self._post_query(content, await self._ensure_token(force_refresh=True))
        response.raise_for_status()
        payload = response.json()
        return payload if isinstance(payload, list) else []

    async def _post_query(self, content: str, token: str) -> httpx.Response:
        headers = {"Client-ID": self.client_id or "", "Authorization": f"Bearer {token}"}
        async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
            return await client.post(self._game_url, content=content, headers=headers)

    async def search_games(self, title: str, limit: int = 10) -> list[GameMetadata]:
        """Return up to ``limit`` candidate games for a title, in IGDB's order."""
        if not title.strip():
            return []
        escaped = title.replace("\\", "\\\\").replace('"', '\\"')
        query = f'search "{escaped}"; fields {SEARCH_FIELDS}; limit {limit};'
        results = await lookup_monitor.track(
            self.source_name,
            "search",
            lambda: self._query(query),
            context={"title": title},
        )
        return [parse_game(result) for result in results if result.get("name")]
