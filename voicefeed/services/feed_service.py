from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from voicefeed.core.config import settings
from voicefeed.core.feed_mixer import (
    build_original_entries,
    build_shared_entry,
    dedupe_shared,
    interleave_balanced,
    paginate,
)
from voicefeed.core.records import FeedEntry, ShareRecord, UserIdentity, VoiceNoteRecord, voice_note_from_row
from voicefeed.core.tag_utils import normalize_tag
from voicefeed.repositories.follow_repo import FollowRepository
from voicefeed.repositories.share_repo import ShareRepository
from voicefeed.repositories.user_repo import UserRepository
from voicefeed.repositories.voice_note_repo import VoiceNoteRepository
from voicefeed.schemas.voice_note import FeedItem, VoiceNoteOut, user_summary, voice_note_fields

logger = logging.getLogger(__name__)


class FeedService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.follow_repo = FollowRepository(db)
        self.voice_note_repo = VoiceNoteRepository(db)
        self.share_repo = ShareRepository(db)
        self.user_repo = UserRepository(db)

    def get_balanced_feed(self, *, user_id: UUID, page: int = 1, limit: int = 20) -> list[FeedItem]:
        following_ids = self.follow_repo.get_following_ids(user_id)
        if not following_ids:
            logger.info("user follows no one, returning empty feed", extra={"user_id": str(user_id)})
            return []

        original = build_original_entries(self._load_original_posts(following_ids))
        shared = self._load_shared_entries(following_ids)
        shared = dedupe_shared(original, shared)

        merged = interleave_balanced(original, shared, settings.feed_target_original_ratio)
        page_entries = paginate(merged, page, limit)
        logger.info(
            "assembled balanced feed",
            extra={
                "user_id": str(user_id),
                "original_count": len(original),
                "shared_count": len(shared),
                "page": page,
                "returned": len(page_entries),
            },
        )
        return [self._to_feed_item(entry) for entry in page_entries]

    def get_public_feed(self, *, page: int = 1, limit: int = 20) -> list[VoiceNoteOut]:
        rows = self.voice_note_repo.get_recent_posts(limit=limit, offset=self._offset(page, limit))
        return [VoiceNoteOut(**voice_note_fields(voice_note_from_row(row))) for row in rows]

    def get_voice_notes_by_tag(self, *, tag_name: str, page: int = 1, limit: int = 20) -> list[VoiceNoteOut]:
        tag = normalize_tag(tag_name)
        if not tag:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid tag")
        rows = self.voice_note_repo.get_posts_by_tag(tag, limit=limit, offset=self._offset(page, limit))
        return [VoiceNoteOut(**voice_note_fields(voice_note_from_row(row))) for row in rows]

    def _load_original_posts(self, following_ids: list[UUID]) -> list[VoiceNoteRecord]:
        rows = self.voice_note_repo.get_posts_by_authors(following_ids, limit=settings.feed_candidate_limit)
        return [voice_note_from_row(row) for row in rows]

    def _load_shared_entries(self, following_ids: list[UUID]) -> list[FeedEntry]:
        shares = self.share_repo.get_shares_by_users(following_ids, limit=settings.feed_candidate_limit)
        if not shares:
            return []

        note_ids = list(dict.fromkeys(share.voice_note_id for share in shares))
        notes = {
            note.id: note
            for note in (voice_note_from_row(row) for row in self.voice_note_repo.get_posts_by_ids(note_ids))
        }
        sharers = self.user_repo.get_identities(list(dict.fromkeys(share.user_id for share in shares)))
        return self._build_shared_entries(shares, notes, sharers)

    def _build_shared_entries(
        self,
        shares: list[ShareRecord],
        notes: dict[UUID, VoiceNoteRecord],
        sharers: dict[UUID, UserIdentity],
    ) -> list[FeedEntry]:
        entries: list[FeedEntry] = []
        for share in shares:
            note = notes.get(share.voice_note_id)
            if note is None:
                # share outlived its voice note
                continue
            entry = build_shared_entry(note, share, sharers.get(share.user_id))
            if entry is not None:
                entries.append(entry)
        return entries

    def _to_feed_item(self, entry: FeedEntry) -> FeedItem:
        return FeedItem(
            **voice_note_fields(entry.note),
            is_shared=entry.is_shared,
            shared_at=entry.shared_at,
            shared_by=user_summary(entry.shared_by),
        )

    def _offset(self, page: int, limit: int) -> int:
        return max(page - 1, 0) * limit
