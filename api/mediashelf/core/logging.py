from __future__ import annotations

import logging

from mediashelf.core.config import Settings, settings

LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"


def configure_logging(config: Settings | None = None) -> None:
    """Install the process-wide log format and level."""
    active = config or settings
    logging.basicConfig(level=active.log_level, format=LOG_FORMAT, force=True)
    # httpx logs every request at INFO; keep it for debugging sessions only.
    logging.getLogger("httpx").setLevel(logging.WARNING)
