"""Discovery scoring for posts and creators.

Post score::

    1 + 2 * matching_tags + 3 * liked_creator + 0.3 * likes + 0.5 * comments + 0.1 * plays

The fallback ranking (no personalized candidates) uses the engagement terms
alone. Creator score::

    1 + 0.3 * likes + 0.5 * comments + 0.1 * plays + 2 * posts + 10 * verified

with engagement summed over all of the creator's posts.
"""

from __future__ import annotations

import uuid
from collections import Counter
from collections.abc import Callable, Collection, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from voicefeed.core.counts import coerce_count
from voicefeed.core.records import ScoredCreator, ScoredVoiceNote, UserIdentity, VoiceNoteRecord

BASE_SCORE = 1.0
TAG_MATCH_WEIGHT = 2.0
LIKED_CREATOR_BOOST = 3.0
LIKE_WEIGHT = 0.3
COMMENT_WEIGHT = 0.5
PLAY_WEIGHT = 0.1
CREATOR_POST_WEIGHT = 2.0
VERIFIED_BOOST = 10.0

T = TypeVar("T")


def engagement_score(likes: int, comments: int, plays: int) -> float:
    return likes * LIKE_WEIGHT + comments * COMMENT_WEIGHT + plays * PLAY_WEIGHT


def preferred_tag_counts(liked_posts: Iterable[Mapping[str, Any]]) -> Counter[str]:
    counts: Counter[str] = Counter()
    for liked in liked_posts:
        counts.update(tag for tag in liked.get("tags") or [] if tag)
    return counts


def liked_creator_ids(liked_posts: Iterable[Mapping[str, Any]]) -> set[uuid.UUID]:
    return {liked["author_id"] for liked in liked_posts if liked.get("author_id") is not None}


def score_post(
    note: VoiceNoteRecord,
    preferred_tags: Collection[str],
    liked_creators: Collection[uuid.UUID],
) -> float:
    score = BASE_SCORE
    if preferred_tags:
        score += TAG_MATCH_WEIGHT * sum(1 for tag in note.tags if tag in preferred_tags)
    if note.user_id in liked_creators:
        score += LIKED_CREATOR_BOOST
    return score + engagement_score(note.likes, note.comments, note.plays)


def score_posts(
    notes: Iterable[VoiceNoteRecord],
    preferred_tags: Collection[str],
    liked_creators: Collection[uuid.UUID],
) -> list[ScoredVoiceNote]:
    scored = [ScoredVoiceNote(note=note, discovery_score=score_post(note, preferred_tags, liked_creators)) for note in notes]
    return rank(scored, key=lambda item: item.discovery_score)


def score_posts_by_engagement(notes: Iterable[VoiceNoteRecord]) -> list[ScoredVoiceNote]:
    scored = [
        ScoredVoiceNote(note=note, discovery_score=engagement_score(note.likes, note.comments, note.plays))
        for note in notes
    ]
    return rank(scored, key=lambda item: item.discovery_score)


def score_creator(
    user: UserIdentity,
    posts: Sequence[Mapping[str, Any]],
    *,
    bio: str | None = None,
) -> ScoredCreator:
    total_likes = sum(coerce_count(post.get("likes")) for post in posts)
    total_comments = sum(coerce_count(post.get("comments")) for post in posts)
    total_plays = sum(coerce_count(post.get("plays")) for post in posts)
    score = BASE_SCORE + engagement_score(total_likes, total_comments, total_plays)
    score += CREATOR_POST_WEIGHT * len(posts)
    if user.is_verified:
        score += VERIFIED_BOOST
    return ScoredCreator(
        user=user,
        bio=bio,
        discovery_score=score,
        recent_posts_count=len(posts),
        total_engagement=total_likes + total_comments + total_plays,
    )


def rank(items: Iterable[T], *, key: Callable[[T], float]) -> list[T]:
    # sorted() is stable, so equal scores keep fetch order
    return sorted(items, key=key, reverse=True)
