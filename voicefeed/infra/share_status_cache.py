from typing import Protocol
from uuid import UUID

from redis import Redis

from voicefeed.core.config import settings


class ShareStatusCache(Protocol):
    def get(self, user_id: UUID, voice_note_id: UUID) -> bool | None: ...

    def set(self, user_id: UUID, voice_note_id: UUID, is_shared: bool) -> None: ...

    def invalidate(self, user_id: UUID, voice_note_id: UUID) -> None: ...


class RedisShareStatusCache:
    def __init__(self, redis: Redis, *, ttl_seconds: int | None = None) -> None:
        self.redis = redis
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.share_status_cache_ttl_seconds

    def get(self, user_id: UUID, voice_note_id: UUID) -> bool | None:
        raw = self.redis.get(self._key(user_id, voice_note_id))
        if raw is None:
            return None
        return raw == "1"

    def set(self, user_id: UUID, voice_note_id: UUID, is_shared: bool) -> None:
        self.redis.set(self._key(user_id, voice_note_id), "1" if is_shared else "0", ex=self.ttl_seconds)

    def invalidate(self, user_id: UUID, voice_note_id: UUID) -> None:
        self.redis.delete(self._key(user_id, voice_note_id))

    def _key(self, user_id: UUID, voice_note_id: UUID) -> str:
        return f"voicefeed:share_status:{user_id}:{voice_note_id}"
