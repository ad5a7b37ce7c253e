import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from voicefeed.models.voice_note_comment import VoiceNoteComment
from voicefeed.models.voice_note_like import VoiceNoteLike
from voicefeed.models.voice_note_play import VoiceNotePlay


class InteractionRepository:
    """Likes, comments and plays on voice notes."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_like(self, *, voice_note_id: uuid.UUID, user_id: uuid.UUID) -> VoiceNoteLike | None:
        stmt = select(VoiceNoteLike).where(
            VoiceNoteLike.voice_note_id == voice_note_id,
            VoiceNoteLike.user_id == user_id,
        )
        return self.db.scalar(stmt)

    def add_like(self, *, voice_note_id: uuid.UUID, user_id: uuid.UUID) -> VoiceNoteLike:
        like = self.get_like(voice_note_id=voice_note_id, user_id=user_id)
        if like is not None:
            return like
        try:
            with self.db.begin_nested():
                like = VoiceNoteLike(voice_note_id=voice_note_id, user_id=user_id)
                self.db.add(like)
                self.db.flush()
        except IntegrityError:
            # a concurrent request inserted the same pair first
            like = self.get_like(voice_note_id=voice_note_id, user_id=user_id)
            if like is None:
                raise
        return like

    def delete_like(self, *, voice_note_id: uuid.UUID, user_id: uuid.UUID) -> None:
        stmt = delete(VoiceNoteLike).where(
            VoiceNoteLike.voice_note_id == voice_note_id,
            VoiceNoteLike.user_id == user_id,
        )
        self.db.execute(stmt)

    def count_likes(self, voice_note_id: uuid.UUID) -> int:
        stmt = select(func.count(VoiceNoteLike.id)).where(VoiceNoteLike.voice_note_id == voice_note_id)
        return int(self.db.scalar(stmt) or 0)

    def add_comment(self, *, voice_note_id: uuid.UUID, user_id: uuid.UUID, content: str) -> VoiceNoteComment:
        comment = VoiceNoteComment(voice_note_id=voice_note_id, user_id=user_id, content=content)
        self.db.add(comment)
        self.db.flush()
        return comment

    def add_play(self, *, voice_note_id: uuid.UUID, user_id: uuid.UUID | None) -> VoiceNotePlay:
        play = VoiceNotePlay(voice_note_id=voice_note_id, user_id=user_id)
        self.db.add(play)
        self.db.flush()
        return play

    def count_plays(self, voice_note_id: uuid.UUID) -> int:
        stmt = select(func.count(VoiceNotePlay.id)).where(VoiceNotePlay.voice_note_id == voice_note_id)
        return int(self.db.scalar(stmt) or 0)
