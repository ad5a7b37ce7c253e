from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from voicefeed.core.config import settings
from voicefeed.core.feed_mixer import paginate
from voicefeed.core.records import ScoredCreator, ScoredVoiceNote, identity_from_row, voice_note_from_row
from voicefeed.core.scoring import (
    liked_creator_ids,
    preferred_tag_counts,
    rank,
    score_creator,
    score_posts,
    score_posts_by_engagement,
)
from voicefeed.repositories.follow_repo import FollowRepository
from voicefeed.repositories.user_repo import UserRepository
from voicefeed.repositories.voice_note_repo import VoiceNoteRepository
from voicefeed.schemas.voice_note import DiscoveryCreator, DiscoveryPost, voice_note_fields

logger = logging.getLogger(__name__)


class DiscoveryService:
    """Recommendations outside the follow graph.

    Posts are ranked by tag and creator affinity (from the user's recent likes)
    plus engagement. Each request scores one store page of candidates (newest
    first), so consecutive pages never share a post. When no personalized
    candidate exists at all, pages of the most recent posts of anyone but the
    user are ranked by engagement alone.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.follow_repo = FollowRepository(db)
        self.voice_note_repo = VoiceNoteRepository(db)
        self.user_repo = UserRepository(db)

    def discover_posts(self, *, user_id: UUID, page: int = 1, limit: int = 20) -> list[DiscoveryPost]:
        liked = self.voice_note_repo.get_recent_liked_posts_with_tags(
            user_id,
            limit=settings.discovery_liked_sample,
        )
        preferred_tags = preferred_tag_counts(liked)
        liked_creators = liked_creator_ids(liked)
        following_ids = self.follow_repo.get_following_ids(user_id)

        offset = max(page - 1, 0) * limit
        candidates = self.voice_note_repo.get_candidate_posts(
            exclude_author_ids=following_ids,
            exclude_self_id=user_id,
            limit=limit,
            offset=offset,
        )
        if not candidates and offset and self._has_candidates(following_ids, user_id):
            # past the last personalized page
            return []
        if candidates:
            scored = score_posts(
                [voice_note_from_row(row) for row in candidates],
                preferred_tags,
                liked_creators,
            )
        else:
            logger.info("no personalized discovery candidates, falling back to recent posts", extra={"user_id": str(user_id)})
            fallback = self.voice_note_repo.get_recent_posts(limit=limit, offset=offset, exclude_self_id=user_id)
            scored = score_posts_by_engagement([voice_note_from_row(row) for row in fallback])

        return [self._to_discovery_post(item) for item in scored]

    def discover_creators(self, *, user_id: UUID, page: int = 1, limit: int = 20) -> list[DiscoveryCreator]:
        following_ids = self.follow_repo.get_following_ids(user_id)
        candidates = self.user_repo.get_creator_candidates(
            exclude_ids=[*following_ids, user_id],
            limit=settings.discovery_creator_pool,
        )
        scored: list[ScoredCreator] = []
        for candidate in candidates:
            identity = identity_from_row(candidate["user"])
            if identity is None:
                continue
            scored.append(score_creator(identity, candidate["voice_notes"], bio=candidate["user"].get("bio")))
        ranked = rank(scored, key=lambda item: item.discovery_score)
        return [self._to_discovery_creator(item) for item in paginate(ranked, page, limit)]

    def _has_candidates(self, following_ids: list[UUID], user_id: UUID) -> bool:
        return bool(
            self.voice_note_repo.get_candidate_posts(
                exclude_author_ids=following_ids,
                exclude_self_id=user_id,
                limit=1,
            )
        )

    def _to_discovery_post(self, item: ScoredVoiceNote) -> DiscoveryPost:
        return DiscoveryPost(**voice_note_fields(item.note), discovery_score=item.discovery_score)

    def _to_discovery_creator(self, item: ScoredCreator) -> DiscoveryCreator:
        return DiscoveryCreator(
            id=item.user.id,
            username=item.user.username,
            display_name=item.user.display_name,
            avatar_url=item.user.avatar_url,
            is_verified=item.user.is_verified,
            bio=item.bio,
            discovery_score=item.discovery_score,
            recent_posts_count=item.recent_posts_count,
            total_engagement=item.total_engagement,
        )
