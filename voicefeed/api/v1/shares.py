from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from voicefeed.api.deps import get_current_user, get_share_status_cache
from voicefeed.db.session import get_db
from voicefeed.infra.share_status_cache import ShareStatusCache
from voicefeed.models.user import User
from voicefeed.schemas.voice_note import ShareCountResponse, ShareResponse, ShareStatusResponse
from voicefeed.services.share_service import ShareService

router = APIRouter(prefix="/voice-notes", tags=["shares"])


@router.post("/{voice_note_id}/share", response_model=ShareResponse)
def share_voice_note(
    voice_note_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cache: ShareStatusCache = Depends(get_share_status_cache),
):
    return ShareService(db, cache).share(user=current_user, voice_note_id=voice_note_id)


@router.delete("/{voice_note_id}/share", response_model=ShareResponse)
def unshare_voice_note(
    voice_note_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cache: ShareStatusCache = Depends(get_share_status_cache),
):
    return ShareService(db, cache).unshare(user=current_user, voice_note_id=voice_note_id)


@router.get("/{voice_note_id}/shares", response_model=ShareCountResponse)
def get_share_count(
    voice_note_id: UUID,
    db: Session = Depends(get_db),
):
    return ShareService(db).get_share_count(voice_note_id=voice_note_id)


@router.get("/{voice_note_id}/shares/check", response_model=ShareStatusResponse)
def check_share_status(
    voice_note_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cache: ShareStatusCache = Depends(get_share_status_cache),
):
    return ShareService(db, cache).is_shared(user_id=current_user.id, voice_note_id=voice_note_id)
