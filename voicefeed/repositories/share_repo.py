import logging
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, ProgrammingError
from sqlalchemy.orm import Session

from voicefeed.core.records import ShareRecord
from voicefeed.db.errors import is_undefined_table
from voicefeed.models.voice_note_share import VoiceNoteShare

logger = logging.getLogger(__name__)


class ShareRepository:
    """Access to ``voice_note_shares``.

    Read paths used while assembling feeds treat a missing shares table as
    "no shares yet": the failed transaction is rolled back and an empty result
    returned. Write paths let the error propagate.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_shares_by_users(
        self,
        user_ids: Sequence[uuid.UUID],
        *,
        limit: int | None = None,
    ) -> list[ShareRecord]:
        if not user_ids:
            return []
        stmt = (
            select(VoiceNoteShare.id, VoiceNoteShare.voice_note_id, VoiceNoteShare.user_id, VoiceNoteShare.shared_at)
            .where(VoiceNoteShare.user_id.in_(user_ids))
            .order_by(VoiceNoteShare.shared_at.desc(), VoiceNoteShare.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            rows = self.db.execute(stmt).all()
        except ProgrammingError as exc:
            if not is_undefined_table(exc):
                raise
            self._reset_after_missing_table()
            return []
        return [
            ShareRecord(id=share_id, voice_note_id=voice_note_id, user_id=user_id, shared_at=shared_at)
            for share_id, voice_note_id, user_id, shared_at in rows
        ]

    def count_by_voice_note_ids(self, voice_note_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, int]:
        if not voice_note_ids:
            return {}
        stmt = (
            select(VoiceNoteShare.voice_note_id, func.count(VoiceNoteShare.id))
            .where(VoiceNoteShare.voice_note_id.in_(voice_note_ids))
            .group_by(VoiceNoteShare.voice_note_id)
        )
        try:
            rows = self.db.execute(stmt).all()
        except ProgrammingError as exc:
            if not is_undefined_table(exc):
                raise
            self._reset_after_missing_table()
            return {}
        return {voice_note_id: int(count) for voice_note_id, count in rows}

    def count_for_voice_note(self, voice_note_id: uuid.UUID) -> int:
        stmt = select(func.count(VoiceNoteShare.id)).where(VoiceNoteShare.voice_note_id == voice_note_id)
        return int(self.db.scalar(stmt) or 0)

    def get_share(self, *, voice_note_id: uuid.UUID, user_id: uuid.UUID) -> VoiceNoteShare | None:
        stmt = select(VoiceNoteShare).where(
            VoiceNoteShare.voice_note_id == voice_note_id,
            VoiceNoteShare.user_id == user_id,
        )
        return self.db.scalar(stmt)

    def upsert_share(self, *, voice_note_id: uuid.UUID, user_id: uuid.UUID) -> VoiceNoteShare:
        now = datetime.now(timezone.utc)
        share = self.get_share(voice_note_id=voice_note_id, user_id=user_id)
        if share is None:
            try:
                with self.db.begin_nested():
                    share = VoiceNoteShare(voice_note_id=voice_note_id, user_id=user_id, shared_at=now)
                    self.db.add(share)
                    self.db.flush()
                return share
            except IntegrityError:
                # a concurrent request inserted the same pair first
                share = self.get_share(voice_note_id=voice_note_id, user_id=user_id)
                if share is None:
                    raise
        share.shared_at = now
        share.updated_at = now
        self.db.flush()
        return share

    def delete_share(self, *, voice_note_id: uuid.UUID, user_id: uuid.UUID) -> None:
        stmt = delete(VoiceNoteShare).where(
            VoiceNoteShare.voice_note_id == voice_note_id,
            VoiceNoteShare.user_id == user_id,
        )
        self.db.execute(stmt)

    def _reset_after_missing_table(self) -> None:
        self.db.rollback()
        logger.warning("voice_note_shares table does not exist, treating as zero shares")
