"""Per-source metrics and structured logging for lookup clients."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import Any, Awaitable, Callable, DefaultDict

from mediashelf.utils.redaction import redact_secrets

logger = logging.getLogger("mediashelf.lookup")


@dataclass
class SourceCallMetrics:
    """Counters for one (source, operation) pair."""
    started: int = 0
    succeeded: int = 0
    failed: int = 0
    failure_streak: int = 0
    last_latency_ms: float | None = None
    last_error: str | None = None


class LookupMonitor:
    """Time external calls and emit one JSON log line per outcome."""

    def __init__(self, *, degraded_after_failures: int = 3) -> None:
        self._metrics: DefaultDict[str, DefaultDict[str, SourceCallMetrics]] = defaultdict(
            lambda: defaultdict(SourceCallMetrics)
        )
        self._degraded_after_failures = degraded_after_failures
        self._lock = asyncio.Lock()

    async def track(
        self,
        source: str,
        operation: str,
        func: Callable[[], Awaitable[Any]],
        *,
        context: dict[str, Any] | None = None,
    ) -> Any:
        """Await ``func`` and record its latency; exceptions are re-raised."""
        context = {key: redact_secrets(str(value)) for key, value in (context or {}).items()}
        async with self._lock:
            self._metrics[source][operation].started += 1

        start = time.monotonic()
        try:
            result = await func()
        except Exception as exc:  # noqa: BLE001
            latency_ms = (time.monotonic() - start) * 1000
            error = redact_secrets(str(exc))
            async with self._lock:
                metrics = self._metrics[source][operation]
                metrics.failed += 1
                metrics.failure_streak += 1
                metrics.last_latency_ms = latency_ms
                metrics.last_error = error
            logger.warning(
                json.dumps(
                    {
                        "event": "lookup_failure",
                        "source": source,
                        "operation": operation,
                        "error": error,
                        "latency_ms": round(latency_ms, 2),
                        "context": context,
                    }
                )
            )
            raise

        latency_ms = (time.monotonic() - start) * 1000
        async with self._lock:
            metrics = self._metrics[source][operation]
            metrics.succeeded += 1
            metrics.failure_streak = 0
            metrics.last_latency_ms = latency_ms
            metrics.last_error = None
        logger.info(
            json.dumps(
                {
                    "event": "lookup_success",
                    "source": source,
                    "operation": operation,
                    "latency_ms": round(latency_ms, 2),
                    "context": context,
                }
            )
        )
        return result

    async def snapshot(self) -> dict[str, Any]:
        """Return counters per source plus a degraded flag."""
        async with self._lock:
            snap: dict[str, Any] = {}
            for source, operations in self._metrics.items():
                degraded = any(
                    metrics.failure_streak >= self._degraded_after_failures for metrics in operations.values()
                )
                snap[source] = {
                    "state": "degraded" if degraded else "ok",
                    "operations": {name: asdict(metrics) for name, metrics in operations.items()},
                }
            return snap

    async def reset(self) -> None:
        async with self._lock:
            self._metrics.clear()


lookup_monitor = LookupMonitor()
