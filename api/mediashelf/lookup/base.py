"""Lookup primitives: client payloads, client contracts and the strategy base."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

from mediashelf.schema.lookup import LookupResponse
from mediashelf.schema.media import MediaType

ResponseT = TypeVar("ResponseT", bound=LookupResponse)


@dataclass(slots=True)
class ProductDescriptor:
    """Retail product record returned by a barcode lookup."""
    title: str
    brand: str | None = None
    category: str | None = None
    model: str | None = None
    isbn: str | None = None
    images: list[str] = field(default_factory=list)
    raw_payload: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class MovieMetadata:
    title: str
    genres: list[str] = field(default_factory=list)
    companies: list[str] = field(default_factory=list)
    overview: str = ""
    release_date: str = ""
    runtime: int | None = None
    certification: str = ""
    is_tv_series: bool = False


@dataclass(slots=True)
class BookMetadata:
    title: str
    subtitle: str = ""
    authors: list[str] = field(default_factory=list)
    pages: int | None = None
    publishers: list[str] = field(default_factory=list)
    publish_date: str = ""
    subjects: list[str] = field(default_factory=list)
    physical_format: str = ""
    image_url: str | None = None


@dataclass(slots=True)
class GameMetadata:
    title: str
    genres: list[str] = field(default_factory=list)
    developers: list[str] = field(default_factory=list)
    publishers: list[str] = field(default_factory=list)
    platforms: list[str] = field(default_factory=list)
    release_date: str = ""
    ratings: list[str] = field(default_factory=list)
    summary: str = ""
    image_url: str | None = None


@dataclass(slots=True)
class ReleaseTrack:
    number: str
    title: str
    length_ms: int | None = None


@dataclass(slots=True)
class ReleaseMedium:
    format: str = ""
    track_count: int = 0
    tracks: list[ReleaseTrack] = field(default_factory=list)


@dataclass(slots=True)
class MusicRelease:
    """A MusicBrainz release flattened to the fields the catalog keeps."""
    id: str
    title: str
    date: str = ""
    artists: list[str] = field(default_factory=list)
    tags: list[tuple[str, int]] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    media: list[ReleaseMedium] = field(default_factory=list)


class ProductLookupClient(Protocol):
    async def lookup_barcode(self, barcode: str) -> ProductDescriptor | None: ...


class MovieMetadataClient(Protocol):
    async def search_and_get_details(self, title: str, year: int | None = None) -> MovieMetadata | None: ...


class BookMetadataClient(Protocol):
    async def get_book(self, identifier_kind: str, value: str) -> BookMetadata | None: ...


class GameMetadataClient(Protocol):
    async def search_games(self, title: str) -> list[GameMetadata]: ...


class MusicMetadataClient(Protocol):
    async def release_by_barcode(self, barcode: str) -> MusicRelease | None: ...

    async def release_by_id(self, release_id: str) -> MusicRelease | None: ...


class LookupStrategy(Generic[ResponseT]):
    """Resolve one media type from the identifier kinds it declares."""
    media_type: MediaType
    identifier_kinds: frozenset[str] = frozenset()

    def supports_identifier_kind(self, identifier_kind: str) -> bool:
        return identifier_kind.strip().lower() in self.identifier_kinds

    async def lookup(self, identifier_kind: str, value: str) -> ResponseT | None:
        """Return a normalized response, or None when any source has no record."""
        raise NotImplementedError
