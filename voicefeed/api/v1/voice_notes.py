from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from voicefeed.api.deps import get_current_user
from voicefeed.core.config import settings
from voicefeed.db.session import get_db
from voicefeed.models.user import User
from voicefeed.schemas.voice_note import FeedItem, VoiceNoteOut
from voicefeed.services.feed_service import FeedService

router = APIRouter(prefix="/voice-notes", tags=["voice-notes"])


@router.get("/feed", response_model=list[FeedItem])
def get_feed(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.feed_default_limit, ge=1, le=settings.max_page_limit),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return FeedService(db).get_balanced_feed(user_id=current_user.id, page=page, limit=limit)


@router.get("/public", response_model=list[VoiceNoteOut])
def get_public_feed(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.feed_default_limit, ge=1, le=settings.max_page_limit),
    db: Session = Depends(get_db),
):
    return FeedService(db).get_public_feed(page=page, limit=limit)


@router.get("/tags/{tag_name}", response_model=list[VoiceNoteOut])
def get_voice_notes_by_tag(
    tag_name: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.feed_default_limit, ge=1, le=settings.max_page_limit),
    db: Session = Depends(get_db),
):
    return FeedService(db).get_voice_notes_by_tag(tag_name=tag_name, page=page, limit=limit)
