"""FastAPI application entrypoint and health reporting."""

from typing import Any

from fastapi import FastAPI

from mediashelf.api.deps import get_cache_store
from mediashelf.api.router import api_router
from mediashelf.core.config import settings
from mediashelf.core.logging import configure_logging
from mediashelf.lookup.observability import lookup_monitor
from mediashelf.services.cache_service import RedisCacheStore

app = FastAPI(title=settings.app_name)
app.include_router(api_router, prefix=settings.api_prefix)


@app.on_event("startup")
async def _configure_logging() -> None:
    configure_logging(settings)


@app.on_event("shutdown")
async def _close_cache() -> None:
    cache = get_cache_store()
    if isinstance(cache, RedisCacheStore):
        await cache.close()


def _summarize_lookups(snapshot: dict[str, Any]) -> dict[str, Any]:
    """Flag sources whose latest calls keep failing."""
    issues = [
        {
            "source": source,
            "operation": operation,
            "failure_streak": metrics["failure_streak"],
            "error": metrics["last_error"],
        }
        for source, payload in snapshot.items()
        if payload["state"] == "degraded"
        for operation, metrics in payload["operations"].items()
        if metrics["failure_streak"]
    ]
    return {"sources": snapshot, "issues": issues}


@app.get("/health", tags=["internal"])
@app.get(f"{settings.api_prefix}/health", tags=["internal"])
async def health() -> dict[str, Any]:
    """Return health status with lookup-client telemetry."""
    telemetry = _summarize_lookups(await lookup_monitor.snapshot())
    status = "ok" if not telemetry["issues"] else "degraded"
    return {"status": status, "lookups": telemetry}
