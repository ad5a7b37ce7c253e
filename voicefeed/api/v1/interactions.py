from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from voicefeed.api.deps import get_current_user, get_optional_user
from voicefeed.db.session import get_db
from voicefeed.models.user import User
from voicefeed.schemas.interaction import CommentOut, CreateCommentRequest, LikeResponse, PlayResponse
from voicefeed.services.interaction_service import InteractionService

router = APIRouter(prefix="/voice-notes", tags=["interactions"])


@router.post("/{voice_note_id}/like", response_model=LikeResponse)
def like_voice_note(
    voice_note_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return InteractionService(db).like(user=current_user, voice_note_id=voice_note_id)


@router.delete("/{voice_note_id}/like", response_model=LikeResponse)
def unlike_voice_note(
    voice_note_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return InteractionService(db).unlike(user=current_user, voice_note_id=voice_note_id)


@router.post("/{voice_note_id}/comments", response_model=CommentOut, status_code=201)
def add_comment(
    voice_note_id: UUID,
    payload: CreateCommentRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return InteractionService(db).add_comment(user=current_user, voice_note_id=voice_note_id, content=payload.content)


@router.post("/{voice_note_id}/play", response_model=PlayResponse)
def record_play(
    voice_note_id: UUID,
    current_user: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    return InteractionService(db).record_play(voice_note_id=voice_note_id, user=current_user)
