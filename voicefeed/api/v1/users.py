from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from voicefeed.api.deps import get_current_user
from voicefeed.db.session import get_db
from voicefeed.models.user import User
from voicefeed.schemas.interaction import MessageResponse
from voicefeed.services.interaction_service import InteractionService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/{user_id}/follow", response_model=MessageResponse)
def follow_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return InteractionService(db).follow_user(user=current_user, target_user_id=user_id)


@router.delete("/{user_id}/follow", response_model=MessageResponse)
def unfollow_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return InteractionService(db).unfollow_user(user=current_user, target_user_id=user_id)
