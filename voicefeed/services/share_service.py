import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import ProgrammingError
from sqlalchemy.orm import Session

from voicefeed.db.errors import is_undefined_table
from voicefeed.infra.share_status_cache import ShareStatusCache
from voicefeed.models.user import User
from voicefeed.repositories.share_repo import ShareRepository
from voicefeed.repositories.voice_note_repo import VoiceNoteRepository
from voicefeed.schemas.voice_note import ShareCountResponse, ShareResponse, ShareStatusResponse

logger = logging.getLogger(__name__)

SHARES_TABLE_MISSING = "Voice note shares table does not exist"


class ShareService:
    def __init__(self, db: Session, cache: ShareStatusCache | None = None) -> None:
        self.db = db
        self.cache = cache
        self.share_repo = ShareRepository(db)
        self.voice_note_repo = VoiceNoteRepository(db)

    def share(self, *, user: User, voice_note_id: UUID) -> ShareResponse:
        self._ensure_voice_note(voice_note_id)
        try:
            self.share_repo.upsert_share(voice_note_id=voice_note_id, user_id=user.id)
            self.db.commit()
        except ProgrammingError as exc:
            self._raise_unavailable_if_missing_table(exc)
            raise
        self._invalidate(user.id, voice_note_id)
        logger.info("voice note shared", extra={"voice_note_id": str(voice_note_id), "user_id": str(user.id)})
        return ShareResponse(
            message="Share recorded successfully",
            voice_note_id=voice_note_id,
            share_count=self.share_repo.count_for_voice_note(voice_note_id),
        )

    def unshare(self, *, user: User, voice_note_id: UUID) -> ShareResponse:
        self._ensure_voice_note(voice_note_id)
        try:
            self.share_repo.delete_share(voice_note_id=voice_note_id, user_id=user.id)
            self.db.commit()
        except ProgrammingError as exc:
            self._raise_unavailable_if_missing_table(exc)
            raise
        self._invalidate(user.id, voice_note_id)
        return ShareResponse(
            message="Share removed successfully",
            voice_note_id=voice_note_id,
            share_count=self.share_repo.count_for_voice_note(voice_note_id),
        )

    def get_share_count(self, *, voice_note_id: UUID) -> ShareCountResponse:
        self._ensure_voice_note(voice_note_id)
        try:
            count = self.share_repo.count_for_voice_note(voice_note_id)
        except ProgrammingError as exc:
            if not is_undefined_table(exc):
                raise
            self.db.rollback()
            count = 0
        return ShareCountResponse(voice_note_id=voice_note_id, share_count=count)

    def is_shared(self, *, user_id: UUID, voice_note_id: UUID) -> ShareStatusResponse:
        cached = self.cache.get(user_id, voice_note_id) if self.cache is not None else None
        if cached is not None:
            return ShareStatusResponse(is_shared=cached)
        try:
            shared = self.share_repo.get_share(voice_note_id=voice_note_id, user_id=user_id) is not None
        except ProgrammingError as exc:
            if not is_undefined_table(exc):
                raise
            self.db.rollback()
            return ShareStatusResponse(is_shared=False)
        if self.cache is not None:
            self.cache.set(user_id, voice_note_id, shared)
        return ShareStatusResponse(is_shared=shared)

    def _invalidate(self, user_id: UUID, voice_note_id: UUID) -> None:
        if self.cache is not None:
            self.cache.invalidate(user_id, voice_note_id)

    def _ensure_voice_note(self, voice_note_id: UUID) -> None:
        if not self.voice_note_repo.exists(voice_note_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Voice note not found")

    def _raise_unavailable_if_missing_table(self, exc: ProgrammingError) -> None:
        if not is_undefined_table(exc):
            return
        self.db.rollback()
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=SHARES_TABLE_MISSING) from exc
