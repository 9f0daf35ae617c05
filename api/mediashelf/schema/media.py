"""Canonical catalog entities, one model per media type."""

from __future__ import annotations

import enum

from pydantic import Field

from mediashelf.core.errors import UnknownMediaTypeError
from mediashelf.schema.base import CatalogModel


class MediaType(str, enum.Enum):
    """Supported media categories for catalog items."""
    BOOKS = "books"
    MOVIES = "movies"
    GAMES = "games"
    MUSICS = "musics"

    @property
    def key_name(self) -> str:
        """Spelling used in cache keys, e.g. ``metadata:Books:Format``."""
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: str | MediaType) -> MediaType:
        """Resolve a media type case-insensitively, accepting singular forms."""
        if isinstance(value, MediaType):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if key in (member.value, member.value[:-1]):
                return member
        raise UnknownMediaTypeError(value)


class CatalogEntity(CatalogModel):
    """Fields shared by every catalog entity."""
    id: str | None = None
    title: str = ""
    format: str | None = None


class Book(CatalogEntity):
    isbn: str | None = None
    pages: int | None = None
    publication_date: str | None = None
    authors: list[str] = Field(default_factory=list)
    publisher: str | None = None
    subtitle: str | None = None
    genres: list[str] = Field(default_factory=list)
    plot: str | None = None


class Movie(CatalogEntity):
    barcode: str | None = None
    release_date: str | None = None
    rating: str | None = None
    runtime: int | None = None
    studios: list[str] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)
    plot: str | None = None
    is_tv_series: bool = False


class Game(CatalogEntity):
    barcode: str | None = None
    release_date: str | None = None
    rating: str | None = None
    platform: str | None = None
    developers: list[str] = Field(default_factory=list)
    publishers: list[str] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)
    description: str | None = None


class Disc(CatalogModel):
    track_number: int
    title: str = ""
    duration: int | None = None


class Music(CatalogEntity):
    barcode: str | None = None
    artist: str | None = None
    release_date: str | None = None
    genres: list[str] = Field(default_factory=list)
    duration: int | None = None
    label: str | None = None
    tracks: int | None = None
    discs: int | None = None
    disc_list: list[Disc] = Field(default_factory=list)


ENTITY_MODELS: dict[MediaType, type[CatalogEntity]] = {
    MediaType.BOOKS: Book,
    MediaType.MOVIES: Movie,
    MediaType.GAMES: Game,
    MediaType.MUSICS: Music,
}
