from __future__ import annotations

import logging
import re

from mediashelf.lookup.base import LookupStrategy, MusicMetadataClient, MusicRelease
from mediashelf.schema.lookup import MusicLookupResponse
from mediashelf.schema.media import Disc, MediaType

logger = logging.getLogger("mediashelf.lookup.music")

MAX_GENRES = 5


def title_case_genre(name: str) -> str:
    """``"hip-hop"`` -> ``"Hip Hop"``; words split on spaces and hyphens."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in re.split(r"[\s-]+", name) if word)


def to_music_response(release: MusicRelease) -> MusicLookupResponse:
    ranked_tags = sorted(release.tags, key=lambda tag: tag[1], reverse=True)[:MAX_GENRES]
    genres = [genre for genre in (title_case_genre(name) for name, _ in ranked_tags) if genre]

    duration: int | None = None
    total_tracks = 0
    disc_list: list[Disc] = []
    for medium in release.media:
        total_tracks += medium.track_count
        for track in medium.tracks:
            if track.length_ms is not None:
                duration = (duration or 0) + track.length_ms
            if track.number.isdigit():
                disc_list.append(Disc(track_number=int(track.number), title=track.title, duration=track.length_ms))

    return MusicLookupResponse(
        title=release.title,
        artist=release.artists[0] if release.artists else "",
        release_date=release.date,
        genres=genres,
        duration=duration,
        label=release.labels[0] if release.labels else "",
        tracks=total_tracks or None,
        discs=len(release.media) or None,
        disc_list=disc_list,
        format=release.media[0].format if release.media else "",
    )


class MusicLookupStrategy(LookupStrategy[MusicLookupResponse]):
    """Barcode search for a release id, then a full release fetch with tracks."""
    media_type = MediaType.MUSICS
    identifier_kinds = frozenset({"upc", "ean"})

    def __init__(self, releases: MusicMetadataClient) -> None:
        self._releases = releases

    async def lookup(self, identifier_kind: str, value: str) -> MusicLookupResponse | None:
        if not self.supports_identifier_kind(identifier_kind):
            return None
        found = await self._releases.release_by_barcode(value)
        if found is None:
            logger.warning("No release found for %s %s", identifier_kind, value)
            return None

        release = await self._releases.release_by_id(found.id)
        if release is None:
            logger.warning("Release %s vanished between search and fetch", found.id)
            return None
        return to_music_response(release)
