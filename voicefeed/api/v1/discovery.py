from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from voicefeed.api.deps import get_current_user
from voicefeed.core.config import settings
from voicefeed.db.session import get_db
from voicefeed.models.user import User
from voicefeed.schemas.voice_note import DiscoveryCreator, DiscoveryPost
from voicefeed.services.discovery_service import DiscoveryService

router = APIRouter(prefix="/voice-notes/discovery", tags=["discovery"])


@router.get("/posts", response_model=list[DiscoveryPost])
def discover_posts(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.discovery_default_limit, ge=1, le=settings.max_page_limit),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return DiscoveryService(db).discover_posts(user_id=current_user.id, page=page, limit=limit)


@router.get("/users", response_model=list[DiscoveryCreator])
def discover_users(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.discovery_default_limit, ge=1, le=settings.max_page_limit),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return DiscoveryService(db).discover_creators(user_id=current_user.id, page=page, limit=limit)
