from voicefeed.models.base import Base
from voicefeed.models.follow import Follow
from voicefeed.models.user import User
from voicefeed.models.voice_note import VoiceNote
from voicefeed.models.voice_note_comment import VoiceNoteComment
from voicefeed.models.voice_note_like import VoiceNoteLike
from voicefeed.models.voice_note_play import VoiceNotePlay
from voicefeed.models.voice_note_share import VoiceNoteShare
from voicefeed.models.voice_note_tag import VoiceNoteTag

__all__ = [
    "Base",
    "User",
    "Follow",
    "VoiceNote",
    "VoiceNoteTag",
    "VoiceNoteLike",
    "VoiceNoteComment",
    "VoiceNotePlay",
    "VoiceNoteShare",
]
