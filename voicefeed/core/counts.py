"""Flatten aggregate count fields coming back from the store.

Nested aggregate selects return each count as a one-element list of
``{"count": n}`` objects instead of a scalar. Everything past ingestion works
on plain non-negative integers, so rows go through :func:`normalize_counts`
right after they are fetched.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

COUNT_FIELDS = ("likes", "comments", "plays", "shares")


def coerce_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (list, tuple)):
        if len(value) != 1:
            return 0
        return coerce_count(value[0])
    if isinstance(value, Mapping):
        return coerce_count(value.get("count"))
    if isinstance(value, int):
        return value if value > 0 else 0
    if isinstance(value, float):
        return int(value) if value > 0 else 0
    if isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return 0
        return parsed if parsed > 0 else 0
    return 0


def normalize_counts(raw: Mapping[str, Any]) -> dict[str, Any]:
    normalized = dict(raw)
    for field in COUNT_FIELDS:
        normalized[field] = coerce_count(raw.get(field))
    return normalized
