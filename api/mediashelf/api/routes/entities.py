"""Catalog entity CRUD; every write invalidates the aggregates of its media type."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from pydantic import ValidationError

from mediashelf.api.deps import get_entity_store, get_media_type
from mediashelf.schema.media import ENTITY_MODELS, CatalogEntity, MediaType
from mediashelf.services.entity_store import EntityStore

router = APIRouter()


def _parse_entity(media_type: MediaType, payload: dict[str, Any]) -> CatalogEntity:
    try:
        return ENTITY_MODELS[media_type].model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False),
        ) from exc


@router.get("/{media_type}")
async def list_entities(
    media_type: MediaType = Depends(get_media_type),
    store: EntityStore = Depends(get_entity_store),
) -> list[dict[str, Any]]:
    return [entity.model_dump() for entity in await store.list_all(media_type)]


@router.get("/{media_type}/{entity_id}")
async def get_entity(
    entity_id: str,
    media_type: MediaType = Depends(get_media_type),
    store: EntityStore = Depends(get_entity_store),
) -> dict[str, Any]:
    entity = await store.get(media_type, entity_id)
    if entity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entity not found")
    return entity.model_dump()


@router.post("/{media_type}", status_code=status.HTTP_201_CREATED)
async def create_entity(
    payload: dict[str, Any] = Body(...),
    media_type: MediaType = Depends(get_media_type),
    store: EntityStore = Depends(get_entity_store),
) -> dict[str, Any]:
    created = await store.create(media_type, _parse_entity(media_type, payload))
    return created.model_dump()


@router.put("/{media_type}/{entity_id}")
async def update_entity(
    entity_id: str,
    payload: dict[str, Any] = Body(...),
    media_type: MediaType = Depends(get_media_type),
    store: EntityStore = Depends(get_entity_store),
) -> dict[str, Any]:
    updated = await store.update(media_type, entity_id, _parse_entity(media_type, payload))
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entity not found")
    return updated.model_dump()


@router.delete("/{media_type}/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entity(
    entity_id: str,
    media_type: MediaType = Depends(get_media_type),
    store: EntityStore = Depends(get_entity_store),
) -> Response:
    if not await store.delete(media_type, entity_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entity not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
