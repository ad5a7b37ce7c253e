from uuid import uuid4

import pytest

from factories import make_identity, make_note
from voicefeed.core.records import UserIdentity
from voicefeed.core.scoring import (
    liked_creator_ids,
    preferred_tag_counts,
    rank,
    score_creator,
    score_post,
    score_posts,
    score_posts_by_engagement,
)


def test_score_post_combines_tag_matches_and_engagement() -> None:
    note = make_note(tags=["music", "talk"], likes=10, comments=4, plays=50)

    assert score_post(note, {"music", "talk"}, set()) == pytest.approx(15.0)


def test_score_post_boosts_liked_creator() -> None:
    creator_id = uuid4()
    note = make_note(user_id=creator_id, tags=["music", "talk"], likes=10, comments=4, plays=50)

    assert score_post(note, {"music", "talk"}, {creator_id}) == pytest.approx(18.0)


def test_score_post_without_signals_is_base_plus_engagement() -> None:
    note = make_note(tags=["music"], likes=1)

    assert score_post(note, set(), set()) == pytest.approx(1.3)


def test_preferences_come_from_liked_posts() -> None:
    author = uuid4()
    liked = [
        {"post_id": uuid4(), "author_id": author, "tags": ["music", "talk"]},
        {"post_id": uuid4(), "author_id": None, "tags": ["music"]},
    ]

    tags = preferred_tag_counts(liked)

    assert tags["music"] == 2
    assert "talk" in tags
    assert liked_creator_ids(liked) == {author}


def test_score_posts_ranks_descending_and_keeps_ties_in_fetch_order() -> None:
    first = make_note(likes=1)
    second = make_note(likes=1)
    best = make_note(likes=5)

    ranked = score_posts([first, second, best], set(), set())

    assert [item.note.id for item in ranked] == [best.id, first.id, second.id]


def test_score_posts_by_engagement_omits_base_and_affinity_terms() -> None:
    note = make_note(tags=["music"], likes=10, comments=4, plays=50)

    (scored,) = score_posts_by_engagement([note])

    assert scored.discovery_score == pytest.approx(10.0)


def test_score_creator_sums_engagement_and_rewards_verification() -> None:
    user = make_identity(username="host")
    verified = UserIdentity(id=uuid4(), username="star", is_verified=True)
    posts = [
        {"id": uuid4(), "likes": [{"count": 10}], "comments": 2, "plays": 20},
        {"id": uuid4(), "likes": 0, "comments": 0, "plays": 0},
    ]

    plain = score_creator(user, posts, bio="hello")
    boosted = score_creator(verified, posts)

    # 1 + 0.3*10 + 0.5*2 + 0.1*20 + 2*2
    assert plain.discovery_score == pytest.approx(11.0)
    assert boosted.discovery_score == pytest.approx(21.0)
    assert plain.recent_posts_count == 2
    assert plain.total_engagement == 32
    assert plain.bio == "hello"


def test_rank_is_stable() -> None:
    items = [("a", 1.0), ("b", 2.0), ("c", 1.0)]

    assert rank(items, key=lambda item: item[1]) == [("b", 2.0), ("a", 1.0), ("c", 1.0)]
