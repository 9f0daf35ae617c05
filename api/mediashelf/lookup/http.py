from __future__ import annotations

from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from mediashelf.core.config import settings
from mediashelf.lookup.observability import lookup_monitor


class ExternalAPIError(Exception):
    pass


async def fetch_json(
    url: str,
    *,
    source: str,
    operation: str,
    headers: dict[str, str] | None = None,
    params: dict | None = None,
    method: str = "GET",
    content: str | None = None,
    not_found_ok: bool = False,
) -> Any:
    """Request ``url`` and decode its JSON body.

    Transport errors, 429s and 5xx responses are retried; other 4xx responses
    raise ``httpx.HTTPStatusError``. With ``not_found_ok`` a 404 returns None.
    """

    async def _request() -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(3),
            wait=wait_exponential_jitter(initial=1, max=8),
            retry=retry_if_exception_type((httpx.TransportError, ExternalAPIError)),
            reraise=True,
        ):
            with attempt:
                async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
                    response = await client.request(method, url, headers=headers, params=params, content=content)
                if response.status_code == 404 and not_found_ok:
                    return None
                if response.status_code == 429 or response.status_code >= 500:
                    raise ExternalAPIError(f"{source} returned {response.status_code}")
                response.raise_for_status()
                return response.json()
        raise ExternalAPIError("Unreachable")

    return await lookup_monitor.track(source, operation, _request, context={"url": url})
