from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from mediashelf.api.deps import get_media_type, get_metadata_service
from mediashelf.core.errors import UnknownFieldError
from mediashelf.schema.media import MediaType
from mediashelf.services.metadata_service import MetadataService

router = APIRouter()


@router.get("/{media_type}/{field_name}", response_model=list[str])
async def distinct_values(
    field_name: str,
    media_type: MediaType = Depends(get_media_type),
    service: MetadataService = Depends(get_metadata_service),
) -> list[str]:
    """List the sorted distinct values of a field, e.g. every book format."""
    try:
        return await service.get_distinct_values(media_type, field_name)
    except UnknownFieldError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
