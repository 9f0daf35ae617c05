"""Strip credentials from URLs and messages before they reach the logs."""

from __future__ import annotations

import re

_USERINFO_RE = re.compile(r"([a-z][a-z0-9+.-]*://)([^@/\s]+)@", re.IGNORECASE)
_CREDENTIAL_PARAM_RE = re.compile(r"(?i)\b(api_key|key|client_secret|access_token|user_key)=([^&\s]+)")


def redact_secrets(text: str) -> str:
    """Mask URL user-info and credential query parameters."""
    if not text:
        return text
    masked = _USERINFO_RE.sub(r"\1***@", text)
    return _CREDENTIAL_PARAM_RE.sub(r"\1=***", masked)
