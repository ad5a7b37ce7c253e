from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from factories import create_access_token, make_row
from voicefeed.api import deps
from voicefeed.api.v1 import discovery as discovery_api
from voicefeed.api.v1 import interactions as interactions_api
from voicefeed.api.v1 import shares as shares_api
from voicefeed.api.v1 import users as users_api
from voicefeed.api.v1 import voice_notes as voice_notes_api
from voicefeed.core.records import ScoredVoiceNote, voice_note_from_row
from voicefeed.db.session import get_db
from voicefeed.main import app
from voicefeed.schemas.interaction import MessageResponse, PlayResponse
from voicefeed.schemas.voice_note import DiscoveryPost, ShareCountResponse, voice_note_fields

CURRENT_USER = SimpleNamespace(id=uuid4())


def _fake_db():
    yield MagicMock()


@pytest.fixture()
def client():
    app.dependency_overrides[get_db] = _fake_db
    app.dependency_overrides[deps.get_current_user] = lambda: CURRENT_USER
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_feed_requires_authentication() -> None:
    app.dependency_overrides[get_db] = _fake_db
    try:
        response = TestClient(app).get("/api/v1/voice-notes/feed")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 401
    assert response.json() == {"detail": "Not authenticated"}


def test_feed_passes_paging_to_service(client, monkeypatch) -> None:
    service = MagicMock()
    service.get_balanced_feed.return_value = []
    monkeypatch.setattr(voice_notes_api, "FeedService", lambda db: service)

    response = client.get("/api/v1/voice-notes/feed", params={"page": 2, "limit": 5})

    assert response.status_code == 200
    assert response.json() == []
    service.get_balanced_feed.assert_called_once_with(user_id=CURRENT_USER.id, page=2, limit=5)


def test_feed_rejects_page_below_one(client) -> None:
    assert client.get("/api/v1/voice-notes/feed", params={"page": 0}).status_code == 422


def test_database_failure_maps_to_server_error(client, monkeypatch) -> None:
    service = MagicMock()
    service.get_balanced_feed.side_effect = OperationalError("SELECT 1", {}, Exception("connection lost"))
    monkeypatch.setattr(voice_notes_api, "FeedService", lambda db: service)

    response = client.get("/api/v1/voice-notes/feed")

    assert response.status_code == 500
    assert response.json() == {"detail": "Server error"}


def test_discovery_posts_serialize_score_in_camel_case(client, monkeypatch) -> None:
    note = voice_note_from_row(make_row(likes=10))
    item = ScoredVoiceNote(note=note, discovery_score=4.0)
    service = MagicMock()
    service.discover_posts.return_value = [
        DiscoveryPost(**voice_note_fields(item.note), discovery_score=item.discovery_score)
    ]
    monkeypatch.setattr(discovery_api, "DiscoveryService", lambda db: service)

    response = client.get("/api/v1/voice-notes/discovery/posts")

    assert response.status_code == 200
    body = response.json()
    assert body[0]["id"] == str(note.id)
    assert body[0]["discoveryScore"] == 4.0
    assert body[0]["likes"] == 10


def test_share_count_route_does_not_build_status_cache(client, monkeypatch) -> None:
    calls = []
    note_id = uuid4()

    class _RecordingShareService:
        def __init__(self, *args) -> None:
            calls.append(args)

        def get_share_count(self, *, voice_note_id):
            return ShareCountResponse(voice_note_id=voice_note_id, share_count=2)

    def _no_cache():
        raise AssertionError("share status cache must not be resolved for share counts")

    monkeypatch.setattr(shares_api, "ShareService", _RecordingShareService)
    app.dependency_overrides[deps.get_share_status_cache] = _no_cache

    response = client.get(f"/api/v1/voice-notes/{note_id}/shares")

    assert response.status_code == 200
    assert response.json()["share_count"] == 2
    assert len(calls) == 1
    assert len(calls[0]) == 1


def test_bearer_token_resolves_current_user(monkeypatch) -> None:
    user = SimpleNamespace(id=uuid4())
    users = MagicMock()
    users.get_by_id.return_value = user
    monkeypatch.setattr(deps, "UserRepository", lambda db: users)
    service = MagicMock()
    service.get_balanced_feed.return_value = []
    monkeypatch.setattr(voice_notes_api, "FeedService", lambda db: service)
    app.dependency_overrides[get_db] = _fake_db
    token = create_access_token(str(user.id))
    try:
        response = TestClient(app).get("/api/v1/voice-notes/feed", headers={"Authorization": f"Bearer {token}"})
        rejected = TestClient(app).get("/api/v1/voice-notes/feed", headers={"Authorization": "Bearer nope"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    service.get_balanced_feed.assert_called_once_with(user_id=user.id, page=1, limit=20)
    assert rejected.status_code == 401
    assert rejected.json() == {"detail": "Invalid token"}


def test_play_can_be_recorded_without_authentication(monkeypatch) -> None:
    service = MagicMock()
    note_id = uuid4()
    service.record_play.return_value = PlayResponse(voice_note_id=note_id, play_count=1)
    monkeypatch.setattr(interactions_api, "InteractionService", lambda db: service)
    app.dependency_overrides[get_db] = _fake_db
    try:
        response = TestClient(app).post(f"/api/v1/voice-notes/{note_id}/play")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["play_count"] == 1
    service.record_play.assert_called_once_with(voice_note_id=note_id, user=None)


def test_follow_route_targets_path_user(client, monkeypatch) -> None:
    service = MagicMock()
    target_id = uuid4()
    service.follow_user.return_value = MessageResponse(message="Followed successfully")
    monkeypatch.setattr(users_api, "InteractionService", lambda db: service)

    response = client.post(f"/api/v1/users/{target_id}/follow")

    assert response.status_code == 200
    service.follow_user.assert_called_once_with(user=CURRENT_USER, target_user_id=target_id)


def test_comment_route_validates_body(client) -> None:
    response = client.post(f"/api/v1/voice-notes/{uuid4()}/comments", json={"content": ""})

    assert response.status_code == 422
