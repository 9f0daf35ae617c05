from __future__ import annotations

import logging
from typing import Any

from mediashelf.core.config import settings
from mediashelf.lookup.base import MovieMetadata
from mediashelf.lookup.http import ExternalAPIError, fetch_json

logger = logging.getLogger("mediashelf.lookup.tmdb")

API_BASE = "https://api.themoviedb.org/3"
CERTIFICATION_COUNTRY = "US"


def _pick_result(results: list[dict[str, Any]], title: str) -> dict[str, Any] | None:
    """Prefer an exact (case-insensitive) title match, else the top hit."""
    wanted = title.casefold()
    for result in results:
        name = result.get("title") or result.get("name") or ""
        if name.casefold() == wanted:
            return result
    return results[0] if results else None


def _movie_certification(payload: dict[str, Any]) -> str:
    for country in payload.get("release_dates", {}).get("results", []):
        if country.get("iso_3166_1") != CERTIFICATION_COUNTRY:
            continue
        for release in country.get("release_dates", []):
            certification = (release.get("certification") or "").strip()
            if certification:
                return certification
    return ""


def _tv_rating(payload: dict[str, Any]) -> str:
    for rating in payload.get("content_ratings", {}).get("results", []):
        if rating.get("iso_3166_1") == CERTIFICATION_COUNTRY:
            return (rating.get("rating") or "").strip()
    return ""


class TmdbClient:
    source_name = "tmdb"

    def __init__(self, api_key: str | None = None, auth_token: str | None = None) -> None:
        self.api_key = api_key or settings.tmdb_api_key
        self.auth_token = auth_token or settings.tmdb_api_auth_header

    def _auth(self) -> tuple[dict[str, str], dict[str, str]]:
        headers: dict[str, str] = {"accept": "application/json"}
        params: dict[str, str] = {}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        elif self.api_key:
            params["api_key"] = self.api_key
        else:
            raise ExternalAPIError("TMDB API credentials missing; set TMDB_API_AUTH_HEADER or TMDB_API_KEY")
        return headers, params

    async def search_and_get_details(self, title: str, year: int | None = None) -> MovieMetadata | None:
        """Search movies first, then TV series, and load details for the best hit."""
        if not title.strip():
            return None
        headers, params = self._auth()

        movie = await self._search("movie", title, {"year": year} if year else {}, headers, params)
        if movie is not None:
            return await self._movie_details(movie["id"], headers, params)

        series = await self._search("tv", title, {"first_air_date_year": year} if year else {}, headers, params)
        if series is not None:
            return await self._tv_details(series["id"], headers, params)

        logger.info("TMDB has no movie or series titled %r (year=%s)", title, year)
        return None

    async def _search(
        self,
        kind: str,
        title: str,
        extra: dict[str, Any],
        headers: dict[str, str],
        params: dict[str, str],
    ) -> dict[str, Any] | None:
        payload = await fetch_json(
            f"{API_BASE}/search/{kind}",
            source=self.source_name,
            operation=f"search_{kind}",
            headers=headers,
            params={
                **params,
                **extra,
                "query": title,
                "page": 1,
                "include_adult": "false",
                "language": "en-US",
            },
        )
        results = [result for result in (payload or {}).get("results", []) if result.get("id") is not None]
        return _pick_result(results, title)

    async def _movie_details(self, tmdb_id: int, headers: dict[str, str], params: dict[str, str]) -> MovieMetadata | None:
        payload = await fetch_json(
            f"{API_BASE}/movie/{tmdb_id}",
            source=self.source_name,
            operation="movie_details",
            headers=headers,
            params={**params, "append_to_response": "release_dates"},
            not_found_ok=True,
        )
        if not payload:
            return None
        return MovieMetadata(
            title=payload.get("title") or "",
            genres=[genre["name"] for genre in payload.get("genres", []) if genre.get("name")],
            companies=[company["name"] for company in payload.get("production_companies", []) if company.get("name")],
            overview=payload.get("overview") or "",
            release_date=payload.get("release_date") or "",
            runtime=payload.get("runtime") or None,
            certification=_movie_certification(payload),
        )

    async def _tv_details(self, tmdb_id: int, headers: dict[str, str], params: dict[str, str]) -> MovieMetadata | None:
        payload = await fetch_json(
            f"{API_BASE}/tv/{tmdb_id}",
            source=self.source_name,
            operation="tv_details",
            headers=headers,
            params={**params, "append_to_response": "content_ratings"},
            not_found_ok=True,
        )
        if not payload:
            return None
        run_times = payload.get("episode_run_time") or [None]
        return MovieMetadata(
            title=payload.get("name") or "",
            genres=[genre["name"] for genre in payload.get("genres", []) if genre.get("name")],
            companies=[company["name"] for company in payload.get("production_companies", []) if company.get("name")],
            overview=payload.get("overview") or "",
            release_date=payload.get("first_air_date") or "",
            runtime=run_times[0],
            certification=_tv_rating(payload),
            is_tv_series=True,
        )
