import uuid
from collections import defaultdict
from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from voicefeed.core.records import UserIdentity
from voicefeed.models.user import User
from voicefeed.models.voice_note import VoiceNote
from voicefeed.repositories.voice_note_repo import engagement_columns


class UserRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_id(self, user_pk: uuid.UUID) -> User | None:
        return self.db.scalar(select(User).where(User.id == user_pk))

    def get_identity(self, user_id: uuid.UUID) -> UserIdentity | None:
        return self.get_identities([user_id]).get(user_id)

    def get_identities(self, user_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, UserIdentity]:
        if not user_ids:
            return {}
        stmt = select(User.id, User.username, User.display_name, User.avatar_url, User.is_verified).where(
            User.id.in_(set(user_ids))
        )
        return {
            user_pk: UserIdentity(
                id=user_pk,
                username=username,
                display_name=display_name,
                avatar_url=avatar_url,
                is_verified=bool(is_verified),
            )
            for user_pk, username, display_name, avatar_url, is_verified in self.db.execute(stmt)
        }

    def get_creator_candidates(
        self,
        *,
        exclude_ids: Sequence[uuid.UUID],
        limit: int,
    ) -> list[dict[str, Any]]:
        """Users outside ``exclude_ids`` with per-post engagement counts.

        Each item is ``{"user": {...public fields, "bio"}, "voice_notes": [{"id", "likes", "comments", "plays"}]}``.
        """
        stmt = select(User)
        if exclude_ids:
            stmt = stmt.where(User.id.not_in(exclude_ids))
        stmt = stmt.order_by(User.created_at.desc(), User.id.desc()).limit(limit)
        users = list(self.db.scalars(stmt))
        if not users:
            return []

        likes, comments, plays = engagement_columns()
        posts_stmt = select(VoiceNote.user_id, VoiceNote.id, likes, comments, plays).where(
            VoiceNote.user_id.in_([user.id for user in users])
        )
        posts_by_user: dict[uuid.UUID, list[dict[str, Any]]] = defaultdict(list)
        for row in self.db.execute(posts_stmt).mappings():
            posts_by_user[row["user_id"]].append(
                {"id": row["id"], "likes": row["likes"], "comments": row["comments"], "plays": row["plays"]}
            )

        return [
            {
                "user": {
                    "id": user.id,
                    "username": user.username,
                    "display_name": user.display_name,
                    "avatar_url": user.avatar_url,
                    "is_verified": user.is_verified,
                    "bio": user.bio,
                },
                "voice_notes": posts_by_user.get(user.id, []),
            }
            for user in users
        ]
