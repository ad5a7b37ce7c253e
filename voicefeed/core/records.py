"""In-process records the feed and discovery pipelines work on.

Raw rows from the repositories are loosely shaped (optional keys, nested
aggregate counts, tag rows). They are converted once, at ingestion, into these
records; response schemas are built from the records on the way out.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from voicefeed.core.counts import normalize_counts
from voicefeed.core.tag_utils import extract_tag_names


@dataclass(frozen=True)
class UserIdentity:
    id: uuid.UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    is_verified: bool = False


@dataclass(frozen=True)
class VoiceNoteRecord:
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    duration: int
    audio_url: str
    created_at: datetime
    background_image: str | None = None
    likes: int = 0
    comments: int = 0
    plays: int = 0
    shares: int = 0
    tags: list[str] = field(default_factory=list)
    author: UserIdentity | None = None


@dataclass(frozen=True)
class ShareRecord:
    id: uuid.UUID
    voice_note_id: uuid.UUID
    user_id: uuid.UUID
    shared_at: datetime


@dataclass(frozen=True)
class FeedEntry:
    note: VoiceNoteRecord
    is_shared: bool = False
    shared_at: datetime | None = None
    shared_by: UserIdentity | None = None


@dataclass(frozen=True)
class ScoredVoiceNote:
    note: VoiceNoteRecord
    discovery_score: float


@dataclass(frozen=True)
class ScoredCreator:
    user: UserIdentity
    bio: str | None
    discovery_score: float
    recent_posts_count: int
    total_engagement: int


def identity_from_row(row: Mapping[str, Any] | None) -> UserIdentity | None:
    if not row or row.get("id") is None:
        return None
    return UserIdentity(
        id=row["id"],
        username=row.get("username") or "",
        display_name=row.get("display_name"),
        avatar_url=row.get("avatar_url"),
        is_verified=bool(row.get("is_verified", False)),
    )


def voice_note_from_row(row: Mapping[str, Any]) -> VoiceNoteRecord:
    data = normalize_counts(row)
    return VoiceNoteRecord(
        id=data["id"],
        user_id=data["user_id"],
        title=data.get("title") or "",
        duration=int(data.get("duration") or 0),
        audio_url=data.get("audio_url") or "",
        background_image=data.get("background_image"),
        created_at=data["created_at"],
        likes=data["likes"],
        comments=data["comments"],
        plays=data["plays"],
        shares=data["shares"],
        tags=extract_tag_names(data.get("tags")),
        author=identity_from_row(data.get("users")),
    )
