from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from voicefeed.schemas.voice_note import UserSummary


class MessageResponse(BaseModel):
    message: str


class LikeResponse(BaseModel):
    message: str
    voice_note_id: UUID
    is_liked: bool
    like_count: int


class CreateCommentRequest(BaseModel):
    content: str = Field(min_length=1, max_length=1000)


class CommentOut(BaseModel):
    id: UUID
    voice_note_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    user: UserSummary | None = None


class PlayResponse(BaseModel):
    voice_note_id: UUID
    play_count: int
