"""Lookup strategy registry and dispatcher assembly."""

from __future__ import annotations

from mediashelf.core.config import Settings, settings
from mediashelf.lookup.clients.igdb import IgdbClient
from mediashelf.lookup.clients.musicbrainz import MusicBrainzClient
from mediashelf.lookup.clients.openlibrary import OpenLibraryClient
from mediashelf.lookup.clients.tmdb import TmdbClient
from mediashelf.lookup.clients.upcitemdb import UpcItemDbClient
from mediashelf.lookup.dispatcher import LookupDispatcher
from mediashelf.lookup.strategies.book import BookLookupStrategy
from mediashelf.lookup.strategies.game import GameLookupStrategy
from mediashelf.lookup.strategies.movie import MovieLookupStrategy
from mediashelf.lookup.strategies.music import MusicLookupStrategy


def build_dispatcher(config: Settings | None = None) -> LookupDispatcher:
    """Wire the default clients into one strategy per media type."""
    config = config or settings
    products = UpcItemDbClient(base_url=config.upcitemdb_base_url, api_key=config.upcitemdb_api_key)
    return LookupDispatcher(
        [
            BookLookupStrategy(products, OpenLibraryClient(base_url=config.openlibrary_base_url)),
            MovieLookupStrategy(
                products,
                TmdbClient(api_key=config.tmdb_api_key, auth_token=config.tmdb_api_auth_header),
            ),
            GameLookupStrategy(
                products,
                IgdbClient(client_id=config.igdb_client_id, client_secret=config.igdb_client_secret),
            ),
            MusicLookupStrategy(
                MusicBrainzClient(base_url=config.musicbrainz_base_url, user_agent=config.musicbrainz_user_agent)
            ),
        ]
    )


__all__ = ["LookupDispatcher", "build_dispatcher"]
