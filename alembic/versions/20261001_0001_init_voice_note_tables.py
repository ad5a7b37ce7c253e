"""init users, follows and voice note tables

Revision ID: 20261001_0001
Revises:
Create Date: 2026-10-01 00:00:00

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261001_0001"
down_revision = None
branch_labels = None
depends_on = None


def _uuid_pk() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()"))


def upgrade() -> None:
    op.create_table(
        "users",
        _uuid_pk(),
        sa.Column("username", sa.String(length=32), nullable=False),
        sa.Column("display_name", sa.String(length=64), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "follows",
        _uuid_pk(),
        sa.Column("follower_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("following_id", postgresql.UUID(as_uuid=True), nullable=False),
        _created_at(),
        sa.CheckConstraint("follower_id <> following_id", name="ck_follows_no_self_follow"),
        sa.ForeignKeyConstraint(["follower_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["following_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("uq_follows_pair", "follows", ["follower_id", "following_id"], unique=True)
    op.create_index("ix_follows_following_id", "follows", ["following_id"], unique=False)

    op.create_table(
        "voice_notes",
        _uuid_pk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("audio_url", sa.Text(), nullable=False),
        sa.Column("background_image", sa.Text(), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_voice_notes_user_id_created_at", "voice_notes", ["user_id", "created_at"], unique=False)
    op.create_index("ix_voice_notes_created_at", "voice_notes", ["created_at"], unique=False)

    op.create_table(
        "voice_note_tags",
        _uuid_pk(),
        sa.Column("voice_note_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tag_name", sa.String(length=64), nullable=False),
        sa.ForeignKeyConstraint(["voice_note_id"], ["voice_notes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("uq_voice_note_tags_note_tag", "voice_note_tags", ["voice_note_id", "tag_name"], unique=True)
    op.create_index("ix_voice_note_tags_tag_name", "voice_note_tags", ["tag_name"], unique=False)

    op.create_table(
        "voice_note_likes",
        _uuid_pk(),
        sa.Column("voice_note_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["voice_note_id"], ["voice_notes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("uq_voice_note_likes_note_user", "voice_note_likes", ["voice_note_id", "user_id"], unique=True)
    op.create_index(
        "ix_voice_note_likes_user_id_created_at",
        "voice_note_likes",
        ["user_id", "created_at"],
        unique=False,
    )

    op.create_table(
        "voice_note_comments",
        _uuid_pk(),
        sa.Column("voice_note_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["voice_note_id"], ["voice_notes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_voice_note_comments_voice_note_id", "voice_note_comments", ["voice_note_id"], unique=False)

    op.create_table(
        "voice_note_plays",
        _uuid_pk(),
        sa.Column("voice_note_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["voice_note_id"], ["voice_notes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_voice_note_plays_voice_note_id", "voice_note_plays", ["voice_note_id"], unique=False)

    op.create_table(
        "voice_note_shares",
        _uuid_pk(),
        sa.Column("voice_note_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("shared_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["voice_note_id"], ["voice_notes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("uq_voice_note_shares_note_user", "voice_note_shares", ["voice_note_id", "user_id"], unique=True)
    op.create_index(
        "ix_voice_note_shares_user_id_shared_at",
        "voice_note_shares",
        ["user_id", "shared_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_table("voice_note_shares")
    op.drop_table("voice_note_plays")
    op.drop_table("voice_note_comments")
    op.drop_table("voice_note_likes")
    op.drop_table("voice_note_tags")
    op.drop_table("voice_notes")
    op.drop_table("follows")
    op.drop_table("users")
