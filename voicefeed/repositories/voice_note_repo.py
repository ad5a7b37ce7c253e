import uuid
from collections import defaultdict
from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from voicefeed.models.user import User
from voicefeed.models.voice_note import VoiceNote
from voicefeed.models.voice_note_comment import VoiceNoteComment
from voicefeed.models.voice_note_like import VoiceNoteLike
from voicefeed.models.voice_note_play import VoiceNotePlay
from voicefeed.models.voice_note_tag import VoiceNoteTag
from voicefeed.repositories.share_repo import ShareRepository


def engagement_columns():
    likes = (
        select(func.count(VoiceNoteLike.id))
        .where(VoiceNoteLike.voice_note_id == VoiceNote.id)
        .correlate(VoiceNote)
        .scalar_subquery()
        .label("likes")
    )
    comments = (
        select(func.count(VoiceNoteComment.id))
        .where(VoiceNoteComment.voice_note_id == VoiceNote.id)
        .correlate(VoiceNote)
        .scalar_subquery()
        .label("comments")
    )
    plays = (
        select(func.count(VoiceNotePlay.id))
        .where(VoiceNotePlay.voice_note_id == VoiceNote.id)
        .correlate(VoiceNote)
        .scalar_subquery()
        .label("plays")
    )
    return likes, comments, plays


class VoiceNoteRepository:
    """Read queries returning raw voice note rows.

    Each row is a plain dict with the voice note columns, ``likes`` /
    ``comments`` / ``plays`` / ``shares`` counts, ``tags`` (tag names) and
    ``users`` (the author's public fields). Rows are converted to records by
    ``voicefeed.core.records.voice_note_from_row``.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.share_repo = ShareRepository(db)

    def get_posts_by_authors(
        self,
        author_ids: Sequence[uuid.UUID],
        *,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        if not author_ids:
            return []
        stmt = self._select_posts().where(VoiceNote.user_id.in_(author_ids))
        stmt = self._newest_first(stmt)
        if limit is not None:
            stmt = stmt.limit(limit)
        return self._fetch(stmt)

    def get_posts_by_ids(self, ids: Sequence[uuid.UUID]) -> list[dict[str, Any]]:
        if not ids:
            return []
        stmt = self._select_posts().where(VoiceNote.id.in_(ids))
        return self._fetch(stmt)

    def get_candidate_posts(
        self,
        *,
        exclude_author_ids: Sequence[uuid.UUID],
        exclude_self_id: uuid.UUID,
        limit: int,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        stmt = self._select_posts().where(VoiceNote.user_id != exclude_self_id)
        if exclude_author_ids:
            stmt = stmt.where(VoiceNote.user_id.not_in(exclude_author_ids))
        stmt = self._newest_first(stmt).offset(offset).limit(limit)
        return self._fetch(stmt)

    def get_recent_posts(
        self,
        *,
        limit: int,
        offset: int = 0,
        exclude_self_id: uuid.UUID | None = None,
    ) -> list[dict[str, Any]]:
        stmt = self._select_posts()
        if exclude_self_id is not None:
            stmt = stmt.where(VoiceNote.user_id != exclude_self_id)
        stmt = self._newest_first(stmt).offset(offset).limit(limit)
        return self._fetch(stmt)

    def get_posts_by_tag(self, tag_name: str, *, limit: int, offset: int = 0) -> list[dict[str, Any]]:
        stmt = (
            self._select_posts()
            .join(VoiceNoteTag, VoiceNoteTag.voice_note_id == VoiceNote.id)
            .where(VoiceNoteTag.tag_name == tag_name)
        )
        stmt = self._newest_first(stmt).offset(offset).limit(limit)
        return self._fetch(stmt)

    def get_recent_liked_posts_with_tags(self, user_id: uuid.UUID, *, limit: int = 50) -> list[dict[str, Any]]:
        stmt = (
            select(VoiceNoteLike.voice_note_id, VoiceNote.user_id)
            .join(VoiceNote, VoiceNote.id == VoiceNoteLike.voice_note_id)
            .where(VoiceNoteLike.user_id == user_id)
            .order_by(VoiceNoteLike.created_at.desc())
            .limit(limit)
        )
        liked = self.db.execute(stmt).all()
        tags_by_note = self._load_tags([voice_note_id for voice_note_id, _ in liked])
        return [
            {"post_id": voice_note_id, "author_id": author_id, "tags": tags_by_note.get(voice_note_id, [])}
            for voice_note_id, author_id in liked
        ]

    def exists(self, voice_note_id: uuid.UUID) -> bool:
        return self.db.scalar(select(VoiceNote.id).where(VoiceNote.id == voice_note_id)) is not None

    def _select_posts(self) -> Select:
        likes, comments, plays = engagement_columns()
        return select(
            VoiceNote.id,
            VoiceNote.user_id,
            VoiceNote.title,
            VoiceNote.duration,
            VoiceNote.audio_url,
            VoiceNote.background_image,
            VoiceNote.created_at,
            User.username.label("author_username"),
            User.display_name.label("author_display_name"),
            User.avatar_url.label("author_avatar_url"),
            User.is_verified.label("author_is_verified"),
            likes,
            comments,
            plays,
        ).join(User, User.id == VoiceNote.user_id)

    def _newest_first(self, stmt: Select) -> Select:
        return stmt.order_by(VoiceNote.created_at.desc(), VoiceNote.id.desc())

    def _fetch(self, stmt: Select) -> list[dict[str, Any]]:
        rows = [dict(row) for row in self.db.execute(stmt).mappings()]
        if not rows:
            return []
        note_ids = [row["id"] for row in rows]
        tags_by_note = self._load_tags(note_ids)
        share_counts = self.share_repo.count_by_voice_note_ids(note_ids)
        for row in rows:
            row["users"] = {
                "id": row["user_id"],
                "username": row.pop("author_username"),
                "display_name": row.pop("author_display_name"),
                "avatar_url": row.pop("author_avatar_url"),
                "is_verified": row.pop("author_is_verified"),
            }
            row["tags"] = tags_by_note.get(row["id"], [])
            row["shares"] = share_counts.get(row["id"], 0)
        return rows

    def _load_tags(self, note_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, list[str]]:
        if not note_ids:
            return {}
        stmt = (
            select(VoiceNoteTag.voice_note_id, VoiceNoteTag.tag_name)
            .where(VoiceNoteTag.voice_note_id.in_(note_ids))
            .order_by(VoiceNoteTag.tag_name.asc())
        )
        tags: dict[uuid.UUID, list[str]] = defaultdict(list)
        for voice_note_id, tag_name in self.db.execute(stmt):
            tags[voice_note_id].append(tag_name)
        return tags
