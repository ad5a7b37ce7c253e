from unittest.mock import MagicMock
from uuid import uuid4

from voicefeed.infra.share_status_cache import RedisShareStatusCache


def test_redis_share_status_cache_round_trips_flags_with_ttl() -> None:
    redis = MagicMock()
    cache = RedisShareStatusCache(redis, ttl_seconds=60)
    user_id, note_id = uuid4(), uuid4()
    key = f"voicefeed:share_status:{user_id}:{note_id}"

    cache.set(user_id, note_id, True)
    redis.set.assert_called_once_with(key, "1", ex=60)

    redis.get.return_value = "0"
    assert cache.get(user_id, note_id) is False
    redis.get.return_value = None
    assert cache.get(user_id, note_id) is None

    cache.invalidate(user_id, note_id)
    redis.delete.assert_called_once_with(key)
