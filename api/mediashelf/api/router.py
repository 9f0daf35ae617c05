"""API router composition for all route groups."""

from fastapi import APIRouter

from .routes import entities, lookup, metadata, stats

api_router = APIRouter()
api_router.include_router(lookup.router, prefix="/lookup", tags=["lookup"])
api_router.include_router(metadata.router, prefix="/metadata", tags=["metadata"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
api_router.include_router(entities.router, prefix="/entities", tags=["entities"])
