import uuid

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from voicefeed.models.follow import Follow


class FollowRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_following_ids(self, user_id: uuid.UUID) -> list[uuid.UUID]:
        stmt = select(Follow.following_id).where(Follow.follower_id == user_id).order_by(Follow.created_at.desc())
        return list(self.db.scalars(stmt))

    def get_follow(self, *, follower_id: uuid.UUID, following_id: uuid.UUID) -> Follow | None:
        stmt = select(Follow).where(Follow.follower_id == follower_id, Follow.following_id == following_id)
        return self.db.scalar(stmt)

    def add_follow(self, *, follower_id: uuid.UUID, following_id: uuid.UUID) -> tuple[Follow, bool]:
        """Returns the follow row and whether it was created by this call."""
        follow = self.get_follow(follower_id=follower_id, following_id=following_id)
        if follow is not None:
            return follow, False
        try:
            with self.db.begin_nested():
                follow = Follow(follower_id=follower_id, following_id=following_id)
                self.db.add(follow)
                self.db.flush()
        except IntegrityError:
            follow = self.get_follow(follower_id=follower_id, following_id=following_id)
            if follow is None:
                raise
            return follow, False
        return follow, True

    def delete_follow(self, *, follower_id: uuid.UUID, following_id: uuid.UUID) -> None:
        stmt = delete(Follow).where(Follow.follower_id == follower_id, Follow.following_id == following_id)
        self.db.execute(stmt)
