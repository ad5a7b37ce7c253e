import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from voicefeed.models.user import User
from voicefeed.repositories.follow_repo import FollowRepository
from voicefeed.repositories.interaction_repo import InteractionRepository
from voicefeed.repositories.user_repo import UserRepository
from voicefeed.repositories.voice_note_repo import VoiceNoteRepository
from voicefeed.schemas.interaction import CommentOut, LikeResponse, MessageResponse, PlayResponse
from voicefeed.schemas.voice_note import UserSummary

logger = logging.getLogger(__name__)


class InteractionService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.interaction_repo = InteractionRepository(db)
        self.follow_repo = FollowRepository(db)
        self.user_repo = UserRepository(db)
        self.voice_note_repo = VoiceNoteRepository(db)

    def like(self, *, user: User, voice_note_id: UUID) -> LikeResponse:
        self._ensure_voice_note(voice_note_id)
        self.interaction_repo.add_like(voice_note_id=voice_note_id, user_id=user.id)
        self.db.commit()
        return LikeResponse(
            message="Liked",
            voice_note_id=voice_note_id,
            is_liked=True,
            like_count=self.interaction_repo.count_likes(voice_note_id),
        )

    def unlike(self, *, user: User, voice_note_id: UUID) -> LikeResponse:
        self._ensure_voice_note(voice_note_id)
        self.interaction_repo.delete_like(voice_note_id=voice_note_id, user_id=user.id)
        self.db.commit()
        return LikeResponse(
            message="Like removed",
            voice_note_id=voice_note_id,
            is_liked=False,
            like_count=self.interaction_repo.count_likes(voice_note_id),
        )

    def add_comment(self, *, user: User, voice_note_id: UUID, content: str) -> CommentOut:
        text = content.strip()
        if not text:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment content is required")
        self._ensure_voice_note(voice_note_id)
        comment = self.interaction_repo.add_comment(voice_note_id=voice_note_id, user_id=user.id, content=text)
        self.db.commit()
        return CommentOut(
            id=comment.id,
            voice_note_id=comment.voice_note_id,
            user_id=comment.user_id,
            content=comment.content,
            created_at=comment.created_at,
            user=UserSummary(
                id=user.id,
                username=user.username,
                display_name=user.display_name,
                avatar_url=user.avatar_url,
            ),
        )

    def record_play(self, *, voice_note_id: UUID, user: User | None = None) -> PlayResponse:
        self._ensure_voice_note(voice_note_id)
        self.interaction_repo.add_play(voice_note_id=voice_note_id, user_id=user.id if user else None)
        self.db.commit()
        return PlayResponse(voice_note_id=voice_note_id, play_count=self.interaction_repo.count_plays(voice_note_id))

    def follow_user(self, *, user: User, target_user_id: UUID) -> MessageResponse:
        if target_user_id == user.id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot follow yourself")
        if not self.user_repo.get_by_id(target_user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        _, created = self.follow_repo.add_follow(follower_id=user.id, following_id=target_user_id)
        if not created:
            return MessageResponse(message="Already following")
        self.db.commit()
        logger.info("user followed", extra={"user_id": str(user.id), "target_user_id": str(target_user_id)})
        return MessageResponse(message="Followed successfully")

    def unfollow_user(self, *, user: User, target_user_id: UUID) -> MessageResponse:
        self.follow_repo.delete_follow(follower_id=user.id, following_id=target_user_id)
        self.db.commit()
        return MessageResponse(message="Unfollowed")

    def _ensure_voice_note(self, voice_note_id: UUID) -> None:
        if not self.voice_note_repo.exists(voice_note_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Voice note not found")
