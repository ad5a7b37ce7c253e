from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from voicefeed.core.records import UserIdentity, VoiceNoteRecord


class UserSummary(BaseModel):
    id: UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None


class VoiceNoteOut(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    duration: int
    audio_url: str
    background_image: str | None = None
    created_at: datetime
    likes: int = 0
    comments: int = 0
    plays: int = 0
    shares: int = 0
    tags: list[str] = Field(default_factory=list)
    author: UserSummary | None = None


class FeedItem(VoiceNoteOut):
    is_shared: bool = False
    shared_at: datetime | None = None
    shared_by: UserSummary | None = None


class DiscoveryPost(VoiceNoteOut):
    discovery_score: float = Field(serialization_alias="discoveryScore")


class DiscoveryCreator(BaseModel):
    id: UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    is_verified: bool = False
    bio: str | None = None
    discovery_score: float = Field(serialization_alias="discoveryScore")
    recent_posts_count: int = Field(serialization_alias="recentPostsCount")
    total_engagement: int = Field(serialization_alias="totalEngagement")


class ShareResponse(BaseModel):
    message: str
    voice_note_id: UUID
    share_count: int


class ShareCountResponse(BaseModel):
    voice_note_id: UUID
    share_count: int


class ShareStatusResponse(BaseModel):
    is_shared: bool


def user_summary(identity: UserIdentity | None) -> UserSummary | None:
    if identity is None:
        return None
    return UserSummary(
        id=identity.id,
        username=identity.username,
        display_name=identity.display_name,
        avatar_url=identity.avatar_url,
    )


def voice_note_fields(note: VoiceNoteRecord) -> dict[str, Any]:
    return {
        "id": note.id,
        "user_id": note.user_id,
        "title": note.title,
        "duration": note.duration,
        "audio_url": note.audio_url,
        "background_image": note.background_image,
        "created_at": note.created_at,
        "likes": note.likes,
        "comments": note.comments,
        "plays": note.plays,
        "shares": note.shares,
        "tags": list(note.tags),
        "author": user_summary(note.author),
    }
