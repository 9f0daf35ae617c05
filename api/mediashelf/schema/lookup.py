"""Lookup responses produced by strategies, one variant per media type."""

from __future__ import annotations

from typing import Union

from pydantic import ConfigDict, Field

from mediashelf.schema.base import CatalogModel
from mediashelf.schema.media import Disc


class LookupRecord(CatalogModel):
    """Base for lookup variants; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")


class BookLookupResponse(LookupRecord):
    title: str
    subtitle: str = ""
    authors: list[str] = Field(default_factory=list)
    pages: int | None = None
    publishers: list[str] = Field(default_factory=list)
    publication_date: str = ""
    genres: list[str] = Field(default_factory=list)
    format: str = ""
    image_url: str | None = None


class MovieLookupResponse(LookupRecord):
    title: str
    genres: list[str] = Field(default_factory=list)
    studios: list[str] = Field(default_factory=list)
    release_date: str = ""
    rating: str = ""
    runtime: int | None = None
    plot: str = ""
    format: str = ""
    is_tv_series: bool = False


class GameLookupResponse(LookupRecord):
    title: str
    platform: str = ""
    genres: list[str] = Field(default_factory=list)
    developers: list[str] = Field(default_factory=list)
    publishers: list[str] = Field(default_factory=list)
    release_date: str = ""
    rating: str = ""
    description: str = ""
    format: str = ""
    image_url: str | None = None


class MusicLookupResponse(LookupRecord):
    title: str
    artist: str = ""
    release_date: str = ""
    genres: list[str] = Field(default_factory=list)
    duration: int | None = None
    label: str = ""
    tracks: int | None = None
    discs: int | None = None
    disc_list: list[Disc] = Field(default_factory=list)
    format: str = ""


LookupResponse = Union[BookLookupResponse, MovieLookupResponse, GameLookupResponse, MusicLookupResponse]
