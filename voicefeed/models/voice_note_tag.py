import uuid

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from voicefeed.models.base import Base


class VoiceNoteTag(Base):
    __tablename__ = "voice_note_tags"
    __table_args__ = (
        Index("uq_voice_note_tags_note_tag", "voice_note_id", "tag_name", unique=True),
        Index("ix_voice_note_tags_tag_name", "tag_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    voice_note_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("voice_notes.id", ondelete="CASCADE"),
        nullable=False,
    )
    tag_name: Mapped[str] = mapped_column(String(64), nullable=False)

    voice_note = relationship("VoiceNote", back_populates="tags")
