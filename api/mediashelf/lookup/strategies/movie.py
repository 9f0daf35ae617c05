"""Movie lookups: barcode to retail product, product title to TMDB metadata.

Implementation notes:
- Only upc/ean identifiers are accepted; a product miss ends the lookup
  before any metadata request is made.
- The search title drops every parenthetical or bracketed qualifier,
  including the release year, which is passed to the search separately.
- Format is read from the qualifiers of the unmodified product title.
"""

from __future__ import annotations

import logging
import re

from mediashelf.lookup.base import (
    LookupStrategy,
    MovieMetadata,
    MovieMetadataClient,
    ProductLookupClient,
)
from mediashelf.schema.lookup import MovieLookupResponse
from mediashelf.schema.media import MediaType

logger = logging.getLogger("mediashelf.lookup.movie")

YEAR_RE = re.compile(r"[(\[]\s*((?:18|19|20)\d{2})\s*[)\]]")
QUALIFIER_RE = re.compile(r"\([^)]*\)|\[[^\]]*\]")
FORMAT_SUFFIX_RE = re.compile(r"\s+-\s+(DVD|Blu-?ray|4K|BD|UHD|Digital|HD)\b.*$", re.IGNORECASE)
TRAILING_FORMAT_RE = re.compile(r"\s+(DVD|Blu-?ray|4K|BD|UHD|Digital)\s*$", re.IGNORECASE)
CONDITION_RE = re.compile(r"\s+(NEW|USED|SEALED|MINT|OPENED|UNOPENED|LIKE NEW)\s*$", re.IGNORECASE)
TRAILING_ARTICLE_RES = (
    re.compile(r"^(.+?),\s*(A|An|The)$", re.IGNORECASE),
    re.compile(r"^(.+?)\s+(The)$", re.IGNORECASE),
)

FORMAT_PRECEDENCE: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("4K", re.compile(r"\b(4K|UHD)\b", re.IGNORECASE)),
    ("Blu-ray", re.compile(r"\bBlu-?ray\b|\bBD\b", re.IGNORECASE)),
    ("DVD", re.compile(r"\bDVD\b", re.IGNORECASE)),
    ("Digital", re.compile(r"\bDigital\b", re.IGNORECASE)),
)


def extract_year(raw_title: str) -> int | None:
    match = YEAR_RE.search(raw_title or "")
    return int(match.group(1)) if match else None


def clean_movie_title(raw_title: str) -> str:
    """Reduce a retail product title to the film's own title, e.g. "Matrix, The [DVD] NEW" to "The Matrix"."""
    title = (raw_title or "").strip()
    title = CONDITION_RE.sub("", title)
    title = QUALIFIER_RE.sub(" ", title)
    title = FORMAT_SUFFIX_RE.sub("", title)
    title = TRAILING_FORMAT_RE.sub("", title)
    title = re.sub(r"\s+", " ", title).strip(" -:,")
    for pattern in TRAILING_ARTICLE_RES:
        article = pattern.match(title)
        if article:
            title = f"{article.group(2)} {article.group(1).strip()}"
            break
    return title


def infer_movie_format(raw_title: str) -> str:
    """Return the highest-precedence format named inside the title's qualifiers."""
    segments = " ".join(QUALIFIER_RE.findall(raw_title or ""))
    for name, pattern in FORMAT_PRECEDENCE:
        if pattern.search(segments):
            return name
    return ""


def to_movie_response(metadata: MovieMetadata, format_name: str) -> MovieLookupResponse:
    return MovieLookupResponse(
        title=metadata.title,
        genres=list(metadata.genres),
        studios=list(metadata.companies),
        release_date=metadata.release_date,
        rating=metadata.certification,
        runtime=metadata.runtime,
        plot=metadata.overview,
        format=format_name,
        is_tv_series=metadata.is_tv_series,
    )


class MovieLookupStrategy(LookupStrategy[MovieLookupResponse]):
    media_type = MediaType.MOVIES
    identifier_kinds = frozenset({"upc", "ean"})

    def __init__(self, products: ProductLookupClient, metadata: MovieMetadataClient) -> None:
        self._products = products
        self._metadata = metadata

    async def lookup(self, identifier_kind: str, value: str) -> MovieLookupResponse | None:
        if not self.supports_identifier_kind(identifier_kind):
            return None
        product = await self._products.lookup_barcode(value)
        if product is None or not product.title.strip():
            logger.warning("No product title found for %s %s", identifier_kind, value)
            return None

        year = extract_year(product.title)
        title = clean_movie_title(product.title)
        format_name = infer_movie_format(product.title)
        logger.info(
            "Barcode %s resolved to %r; searching for %r (year=%s, format=%r)",
            value,
            product.title,
            title,
            year,
            format_name,
        )

        metadata = await self._metadata.search_and_get_details(title, year)
        if metadata is None:
            logger.warning("No movie metadata found for %r (year=%s)", title, year)
            return None
        return to_movie_response(metadata, format_name)
