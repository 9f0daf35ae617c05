from __future__ import annotations

import logging

from mediashelf.lookup.base import BookMetadata, BookMetadataClient, LookupStrategy, ProductLookupClient
from mediashelf.schema.lookup import BookLookupResponse
from mediashelf.schema.media import MediaType

logger = logging.getLogger("mediashelf.lookup.book")

BIBLIOGRAPHIC_KINDS = frozenset({"isbn", "lccn", "oclc", "olid"})
BARCODE_KINDS = frozenset({"upc", "ean"})


def to_book_response(metadata: BookMetadata) -> BookLookupResponse:
    return BookLookupResponse(
        title=metadata.title,
        subtitle=metadata.subtitle,
        authors=list(metadata.authors),
        pages=metadata.pages,
        publishers=list(metadata.publishers),
        publication_date=metadata.publish_date,
        genres=list(metadata.subjects),
        format=metadata.physical_format,
        image_url=metadata.image_url,
    )


class BookLookupStrategy(LookupStrategy[BookLookupResponse]):
    """Resolve books by bibliographic id, or by barcode through the product's ISBN."""
    media_type = MediaType.BOOKS
    identifier_kinds = BIBLIOGRAPHIC_KINDS | BARCODE_KINDS

    def __init__(self, products: ProductLookupClient, books: BookMetadataClient) -> None:
        self._products = products
        self._books = books

    async def lookup(self, identifier_kind: str, value: str) -> BookLookupResponse | None:
        if not self.supports_identifier_kind(identifier_kind):
            return None
        kind = identifier_kind.strip().lower()
        if kind in BARCODE_KINDS:
            product = await self._products.lookup_barcode(value)
            if product is None or not product.isbn:
                logger.warning("No ISBN found for %s %s", kind, value)
                return None
            logger.info("Barcode %s resolved to ISBN %s", value, product.isbn)
            kind, value = "isbn", product.isbn

        metadata = await self._books.get_book(kind, value)
        if metadata is None:
            logger.warning("No book found for %s %s", kind, value)
            return None
        return to_book_response(metadata)
