from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi import HTTPException

from voicefeed.services.interaction_service import InteractionService


def _build_service() -> InteractionService:
    service = InteractionService.__new__(InteractionService)
    service.db = MagicMock()
    service.interaction_repo = MagicMock()
    service.follow_repo = MagicMock()
    service.user_repo = MagicMock()
    service.voice_note_repo = MagicMock()
    service.voice_note_repo.exists.return_value = True
    return service


def _user(username: str = "listener") -> SimpleNamespace:
    return SimpleNamespace(id=uuid4(), username=username, display_name=None, avatar_url=None)


def test_like_records_like_and_returns_count() -> None:
    service = _build_service()
    user = _user()
    note_id = uuid4()
    service.interaction_repo.count_likes.return_value = 4

    response = service.like(user=user, voice_note_id=note_id)

    service.interaction_repo.add_like.assert_called_once_with(voice_note_id=note_id, user_id=user.id)
    service.db.commit.assert_called_once()
    assert response.is_liked is True
    assert response.like_count == 4


def test_unlike_deletes_like() -> None:
    service = _build_service()
    user = _user()
    note_id = uuid4()
    service.interaction_repo.count_likes.return_value = 0

    response = service.unlike(user=user, voice_note_id=note_id)

    service.interaction_repo.delete_like.assert_called_once_with(voice_note_id=note_id, user_id=user.id)
    assert response.is_liked is False
    assert response.like_count == 0


def test_like_unknown_voice_note_returns_404() -> None:
    service = _build_service()
    service.voice_note_repo.exists.return_value = False

    with pytest.raises(HTTPException) as exc_info:
        service.like(user=_user(), voice_note_id=uuid4())

    assert exc_info.value.status_code == 404
    service.interaction_repo.add_like.assert_not_called()


def test_add_comment_strips_content_and_attaches_author() -> None:
    service = _build_service()
    user = _user("commenter")
    note_id = uuid4()
    service.interaction_repo.add_comment.return_value = SimpleNamespace(
        id=uuid4(),
        voice_note_id=note_id,
        user_id=user.id,
        content="nice take",
        created_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
    )

    comment = service.add_comment(user=user, voice_note_id=note_id, content="  nice take ")

    service.interaction_repo.add_comment.assert_called_once_with(
        voice_note_id=note_id, user_id=user.id, content="nice take"
    )
    assert comment.content == "nice take"
    assert comment.user is not None
    assert comment.user.username == "commenter"


def test_add_comment_rejects_blank_content() -> None:
    service = _build_service()

    with pytest.raises(HTTPException) as exc_info:
        service.add_comment(user=_user(), voice_note_id=uuid4(), content="   ")

    assert exc_info.value.status_code == 400
    service.interaction_repo.add_comment.assert_not_called()


def test_record_play_allows_anonymous_listener() -> None:
    service = _build_service()
    note_id = uuid4()
    service.interaction_repo.count_plays.return_value = 12

    response = service.record_play(voice_note_id=note_id)

    service.interaction_repo.add_play.assert_called_once_with(voice_note_id=note_id, user_id=None)
    assert response.play_count == 12


def test_follow_user_creates_follow() -> None:
    service = _build_service()
    user = _user()
    target_id = uuid4()
    service.user_repo.get_by_id.return_value = SimpleNamespace(id=target_id)
    service.follow_repo.add_follow.return_value = (MagicMock(), True)

    response = service.follow_user(user=user, target_user_id=target_id)

    service.follow_repo.add_follow.assert_called_once_with(follower_id=user.id, following_id=target_id)
    service.db.commit.assert_called_once()
    assert response.message == "Followed successfully"


def test_follow_user_is_idempotent() -> None:
    service = _build_service()
    service.user_repo.get_by_id.return_value = SimpleNamespace(id=uuid4())
    service.follow_repo.add_follow.return_value = (MagicMock(), False)

    response = service.follow_user(user=_user(), target_user_id=uuid4())

    assert response.message == "Already following"
    service.db.commit.assert_not_called()


def test_follow_user_rejects_self_and_unknown_target() -> None:
    service = _build_service()
    user = _user()

    with pytest.raises(HTTPException) as self_exc:
        service.follow_user(user=user, target_user_id=user.id)
    service.user_repo.get_by_id.return_value = None
    with pytest.raises(HTTPException) as missing_exc:
        service.follow_user(user=user, target_user_id=uuid4())

    assert self_exc.value.status_code == 400
    assert missing_exc.value.status_code == 404
    service.follow_repo.add_follow.assert_not_called()


def test_unfollow_user_deletes_follow() -> None:
    service = _build_service()
    user = _user()
    target_id = uuid4()

    response = service.unfollow_user(user=user, target_user_id=target_id)

    service.follow_repo.delete_follow.assert_called_once_with(follower_id=user.id, following_id=target_id)
    assert response.message == "Unfollowed"
