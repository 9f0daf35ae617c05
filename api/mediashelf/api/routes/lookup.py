"""Barcode and identifier lookup endpoint."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from mediashelf.api.deps import get_dispatcher, get_media_type
from mediashelf.lookup import LookupDispatcher
from mediashelf.lookup.http import ExternalAPIError
from mediashelf.schema.lookup import LookupResponse
from mediashelf.schema.media import MediaType
from mediashelf.utils.redaction import redact_secrets

router = APIRouter()


@router.get("/{media_type}/{identifier_kind}/{value}", response_model=LookupResponse)
async def lookup(
    identifier_kind: str,
    value: str,
    media_type: MediaType = Depends(get_media_type),
    dispatcher: LookupDispatcher = Depends(get_dispatcher),
) -> LookupResponse:
    """Resolve one identifier to a normalized catalog record."""
    try:
        result = await dispatcher.resolve(media_type, identifier_kind, value)
    except (ExternalAPIError, httpx.HTTPError) as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Lookup source failed: {redact_secrets(str(exc))}",
        ) from exc
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {media_type.value} found for {identifier_kind} {value}",
        )
    return result
