"""Helpers for normalizing free-text catalog values."""

from __future__ import annotations

from typing import Iterable


def distinct_values(values: Iterable[str | None]) -> list[str]:
    """Trim, drop blanks, dedupe (case-sensitive) and sort ordinally."""
    return sorted({value.strip() for value in values if value and value.strip()})
