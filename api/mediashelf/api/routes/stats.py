from __future__ import annotations

from fastapi import APIRouter, Depends

from mediashelf.api.deps import get_stats_service
from mediashelf.schema.stats import Stats
from mediashelf.services.stats_service import StatsService

router = APIRouter()


@router.get("", response_model=Stats)
async def get_stats(service: StatsService = Depends(get_stats_service)) -> Stats:
    """Return catalog-wide counts for every media type."""
    return await service.get_stats()
