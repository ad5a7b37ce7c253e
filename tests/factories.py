from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import jwt

from voicefeed.core.config import settings
from voicefeed.core.records import FeedEntry, ShareRecord, UserIdentity, VoiceNoteRecord

BASE_TIME = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def at(minutes_ago: int) -> datetime:
    return BASE_TIME - timedelta(minutes=minutes_ago)


def make_note(
    *,
    note_id: UUID | None = None,
    user_id: UUID | None = None,
    minutes_ago: int = 0,
    tags: list[str] | None = None,
    likes: int = 0,
    comments: int = 0,
    plays: int = 0,
) -> VoiceNoteRecord:
    return VoiceNoteRecord(
        id=note_id or uuid4(),
        user_id=user_id or uuid4(),
        title="note",
        duration=30,
        audio_url="https://cdn.example.com/a.m4a",
        created_at=at(minutes_ago),
        likes=likes,
        comments=comments,
        plays=plays,
        tags=tags or [],
    )


def make_row(
    *,
    note_id: UUID | None = None,
    user_id: UUID | None = None,
    minutes_ago: int = 0,
    tags: list[str] | None = None,
    likes=0,
    comments=0,
    plays=0,
    shares=0,
    username: str = "author",
) -> dict:
    author_id = user_id or uuid4()
    return {
        "id": note_id or uuid4(),
        "user_id": author_id,
        "title": "note",
        "duration": 30,
        "audio_url": "https://cdn.example.com/a.m4a",
        "background_image": None,
        "created_at": at(minutes_ago),
        "likes": likes,
        "comments": comments,
        "plays": plays,
        "shares": shares,
        "tags": tags or [],
        "users": {"id": author_id, "username": username, "display_name": None, "avatar_url": None},
    }


def make_identity(user_id: UUID | None = None, username: str = "sharer") -> UserIdentity:
    return UserIdentity(id=user_id or uuid4(), username=username, display_name=username.title())


def make_share(*, voice_note_id: UUID, user_id: UUID, minutes_ago: int = 0) -> ShareRecord:
    return ShareRecord(id=uuid4(), voice_note_id=voice_note_id, user_id=user_id, shared_at=at(minutes_ago))


def original(minutes_ago: int = 0) -> FeedEntry:
    return FeedEntry(note=make_note(minutes_ago=minutes_ago))


def shared(minutes_ago: int = 0) -> FeedEntry:
    return FeedEntry(
        note=make_note(minutes_ago=minutes_ago + 1000),
        is_shared=True,
        shared_at=at(minutes_ago),
        shared_by=make_identity(),
    )


def create_access_token(subject: str, *, token_type: str = "access", expires_minutes: int = 15) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "type": token_type,
        "exp": now + timedelta(minutes=expires_minutes),
        "iat": now,
    }
    return jwt.encode(payload, settings.secret_key, algorithm="HS256")
