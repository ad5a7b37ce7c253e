from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

MAX_TAG_LENGTH = 64
TAG_PATTERN_RE = re.compile(r"^[a-z0-9_\-\u3400-\u4dbf\u4e00-\u9fff]+$")


def normalize_tag(raw: str | None) -> str | None:
    if not isinstance(raw, str):
        return None
    value = raw.strip().lstrip("#").strip().lower()
    if not value or len(value) > MAX_TAG_LENGTH:
        return None
    if not TAG_PATTERN_RE.fullmatch(value):
        return None
    return value


def extract_tag_names(values: Iterable[Any] | None) -> list[str]:
    """Accept plain tag strings or ``{"tag_name": ...}`` rows; keep first occurrence order."""
    if not values:
        return []
    names: list[str] = []
    seen: set[str] = set()
    for raw in values:
        if isinstance(raw, Mapping):
            raw = raw.get("tag_name")
        tag = normalize_tag(raw)
        if not tag or tag in seen:
            continue
        seen.add(tag)
        names.append(tag)
    return names
