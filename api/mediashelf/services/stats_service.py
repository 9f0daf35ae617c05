"""Cross-catalog summary statistics, computed cache-aside under one key."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from mediashelf.core.config import settings
from mediashelf.schema.media import Book, Game, MediaType, Movie, Music
from mediashelf.schema.stats import BookStats, GameStats, MovieStats, MusicStats, Stats
from mediashelf.services.cache_keys import STATS_KEY
from mediashelf.services.cache_service import CacheStore
from mediashelf.services.entity_store import EntityStore
from mediashelf.utils.values import distinct_values

logger = logging.getLogger("mediashelf.services.stats")


def summarize_books(books: Sequence[Book]) -> BookStats:
    formats = distinct_values(book.format for book in books)
    authors = distinct_values(author for book in books for author in book.authors)
    return BookStats(
        total=len(books),
        total_formats=len(formats),
        formats=formats,
        unique_authors=len(authors),
        total_pages=sum(book.pages for book in books if book.pages is not None),
    )


def summarize_movies(movies: Sequence[Movie]) -> MovieStats:
    formats = distinct_values(movie.format for movie in movies)
    return MovieStats(
        total=len(movies),
        total_formats=len(formats),
        formats=formats,
        total_tv_series=sum(1 for movie in movies if movie.is_tv_series),
    )


def summarize_games(games: Sequence[Game]) -> GameStats:
    formats = distinct_values(game.format for game in games)
    platforms = distinct_values(game.platform for game in games)
    return GameStats(
        total=len(games),
        total_formats=len(formats),
        formats=formats,
        total_platforms=len(platforms),
        platforms=platforms,
    )


def summarize_music(musics: Sequence[Music]) -> MusicStats:
    formats = distinct_values(music.format for music in musics)
    artists = distinct_values(music.artist for music in musics)
    return MusicStats(
        total=len(musics),
        total_formats=len(formats),
        formats=formats,
        unique_artists=len(artists),
        total_tracks=sum(music.tracks for music in musics if music.tracks is not None),
    )


class StatsService:
    def __init__(self, store: EntityStore, cache: CacheStore, *, ttl_seconds: int | None = None) -> None:
        self._store = store
        self._cache = cache
        self._ttl_seconds = settings.stats_cache_ttl_seconds if ttl_seconds is None else ttl_seconds

    async def _load_all(self) -> tuple[list[Book], list[Movie], list[Game], list[Music]]:
        """Load the four media types concurrently; the first failure cancels the rest."""
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self._store.list_all(media_type)) for media_type in MediaType]
        except BaseExceptionGroup as failure:
            raise failure.exceptions[0] from None
        books, movies, games, musics = (task.result() for task in tasks)
        return books, movies, games, musics

    async def get_stats(self) -> Stats:
        """Return the stats bundle for every media type.

        A miss reloads all four media types concurrently and only aggregates
        once every load has finished. A failed load cancels its siblings and
        leaves the cache untouched.
        """
        cached = await self._cache.get(STATS_KEY, Stats)
        if cached is not None:
            logger.debug("Returning cached statistics")
            return cached

        logger.debug("Cache miss for statistics, loading every media type")
        books, movies, games, musics = await self._load_all()
        stats = Stats(
            book_stats=summarize_books(books),
            movie_stats=summarize_movies(movies),
            game_stats=summarize_games(games),
            music_stats=summarize_music(musics),
        )

        await self._cache.set(STATS_KEY, stats, self._ttl_seconds)
        logger.info(
            "Cached statistics: books=%d, movies=%d, games=%d, music=%d",
            stats.book_stats.total,
            stats.movie_stats.total,
            stats.game_stats.total,
            stats.music_stats.total,
        )
        return stats
