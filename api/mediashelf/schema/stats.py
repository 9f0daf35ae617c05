"""Cross-catalog statistics computed by the stats aggregator."""

from __future__ import annotations

from pydantic import Field

from mediashelf.schema.base import CatalogModel


class KindStats(CatalogModel):
    """Counters every media type reports."""
    total: int = 0
    total_formats: int = 0
    formats: list[str] = Field(default_factory=list)


class BookStats(KindStats):
    unique_authors: int = 0
    total_pages: int = 0


class MovieStats(KindStats):
    total_tv_series: int = 0


class GameStats(KindStats):
    total_platforms: int = 0
    platforms: list[str] = Field(default_factory=list)


class MusicStats(KindStats):
    unique_artists: int = 0
    total_tracks: int = 0


class Stats(CatalogModel):
    book_stats: BookStats
    movie_stats: MovieStats
    game_stats: GameStats
    music_stats: MusicStats
