"""Initial schema for ytgify-share

Revision ID: 20260101_000000
Revises: None
Create Date: 2026-01-01 00:00:00.000000

Creates every table of the service:
- users and the JWT denylist
- gifs, hashtags and their links
- likes, comments, follows
- collections and their ordered GIF links
- notifications and view events

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260101_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list:
    columns = [sa.Column("created_at", sa.DateTime(), nullable=False)]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(), nullable=False))
    return columns


def upgrade() -> None:
    """Create all tables."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(50), nullable=True),
        sa.Column("bio", sa.String(500), nullable=True),
        sa.Column("website", sa.String(), nullable=True),
        sa.Column("twitter_handle", sa.String(), nullable=True),
        sa.Column("youtube_channel", sa.String(), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("jti", sa.String(), nullable=False),
        sa.Column("gifs_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_likes_received", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("follower_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("following_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("preferences", sa.JSON(), nullable=False),
        sa.Column("sign_in_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_sign_in_at", sa.DateTime(), nullable=True),
        sa.Column("last_sign_in_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_jti", "users", ["jti"])
    op.create_index("ix_users_created_at", "users", ["created_at"])

    # Create jwt_denylist table
    op.create_table(
        "jwt_denylist",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("jti", sa.String(), nullable=False),
        sa.Column("exp", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_jwt_denylist_jti", "jwt_denylist", ["jti"], unique=True)

    # Create gifs table
    op.create_table(
        "gifs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(100), nullable=True),
        sa.Column("description", sa.String(2000), nullable=True),
        sa.Column("privacy", sa.String(), nullable=False, server_default="public"),
        sa.Column("youtube_video_url", sa.String(), nullable=True),
        sa.Column("youtube_video_title", sa.String(), nullable=True),
        sa.Column("youtube_channel_name", sa.String(), nullable=True),
        sa.Column("youtube_timestamp_start", sa.Float(), nullable=True),
        sa.Column("youtube_timestamp_end", sa.Float(), nullable=True),
        sa.Column("duration", sa.Float(), nullable=True),
        sa.Column("fps", sa.Integer(), nullable=True),
        sa.Column("resolution_width", sa.Integer(), nullable=True),
        sa.Column("resolution_height", sa.Integer(), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("has_text_overlay", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("file_key", sa.String(), nullable=True),
        sa.Column("composite_file_key", sa.String(), nullable=True),
        sa.Column("thumbnail_key", sa.String(), nullable=True),
        sa.Column("text_overlay_data", sa.JSON(), nullable=True),
        sa.Column("is_remix", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("parent_gif_id", sa.Uuid(), nullable=True),
        sa.Column("remix_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comment_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("share_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["parent_gif_id"], ["gifs.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("user_id", "privacy", "is_remix", "parent_gif_id", "like_count", "deleted_at", "created_at"):
        op.create_index(f"ix_gifs_{column}", "gifs", [column])

    # Create hashtags and gif_hashtags tables
    op.create_table(
        "hashtags",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("usage_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_hashtags_name", "hashtags", ["name"], unique=True)
    op.create_index("ix_hashtags_slug", "hashtags", ["slug"], unique=True)
    op.create_index("ix_hashtags_usage_count", "hashtags", ["usage_count"])

    op.create_table(
        "gif_hashtags",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("gif_id", sa.Uuid(), nullable=False),
        sa.Column("hashtag_id", sa.Uuid(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["gif_id"], ["gifs.id"]),
        sa.ForeignKeyConstraint(["hashtag_id"], ["hashtags.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("gif_id", "hashtag_id", name="uq_gif_hashtags_gif_hashtag"),
    )
    op.create_index("ix_gif_hashtags_gif_id", "gif_hashtags", ["gif_id"])
    op.create_index("ix_gif_hashtags_hashtag_id", "gif_hashtags", ["hashtag_id"])

    # Create likes table
    op.create_table(
        "likes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("gif_id", sa.Uuid(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["gif_id"], ["gifs.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "gif_id", name="uq_likes_user_gif"),
    )
    op.create_index("ix_likes_user_id", "likes", ["user_id"])
    op.create_index("ix_likes_gif_id", "likes", ["gif_id"])

    # Create comments table
    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("gif_id", sa.Uuid(), nullable=False),
        sa.Column("parent_comment_id", sa.Uuid(), nullable=True),
        sa.Column("content", sa.String(2000), nullable=False),
        sa.Column("reply_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["gif_id"], ["gifs.id"]),
        sa.ForeignKeyConstraint(["parent_comment_id"], ["comments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("user_id", "gif_id", "parent_comment_id", "created_at"):
        op.create_index(f"ix_comments_{column}", "comments", [column])

    # Create follows table
    op.create_table(
        "follows",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("follower_id", sa.Uuid(), nullable=False),
        sa.Column("following_id", sa.Uuid(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["follower_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["following_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        sa.CheckConstraint("follower_id <> following_id", name="ck_follows_not_self"),
    )
    op.create_index("ix_follows_follower_id", "follows", ["follower_id"])
    op.create_index("ix_follows_following_id", "follows", ["following_id"])

    # Create collections and collection_gifs tables
    op.create_table(
        "collections",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("gifs_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_collections_user_id", "collections", ["user_id"])

    op.create_table(
        "collection_gifs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("collection_id", sa.Uuid(), nullable=False),
        sa.Column("gif_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["collection_id"], ["collections.id"]),
        sa.ForeignKeyConstraint(["gif_id"], ["gifs.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("collection_id", "gif_id", name="uq_collection_gifs_pair"),
    )
    op.create_index("ix_collection_gifs_collection_id", "collection_gifs", ["collection_id"])
    op.create_index("ix_collection_gifs_gif_id", "collection_gifs", ["gif_id"])

    # Create notifications table
    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("recipient_id", sa.Uuid(), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("notifiable_type", sa.String(), nullable=False),
        sa.Column("notifiable_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("read_at", sa.DateTime(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["recipient_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["actor_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("recipient_id", "actor_id", "notifiable_id", "action", "read_at", "created_at"):
        op.create_index(f"ix_notifications_{column}", "notifications", [column])

    # Create view_events table
    op.create_table(
        "view_events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("gif_id", sa.Uuid(), nullable=False),
        sa.Column("viewer_id", sa.Uuid(), nullable=True),
        sa.Column("viewer_type", sa.String(), nullable=False, server_default="Anonymous"),
        sa.Column("ip_address", sa.String(), nullable=True),
        sa.Column("user_agent", sa.String(), nullable=True),
        sa.Column("referer", sa.String(), nullable=True),
        sa.Column("is_unique", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["gif_id"], ["gifs.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("gif_id", "viewer_id", "ip_address", "created_at"):
        op.create_index(f"ix_view_events_{column}", "view_events", [column])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("view_events")
    op.drop_table("notifications")
    op.drop_table("collection_gifs")
    op.drop_table("collections")
    op.drop_table("follows")
    op.drop_table("comments")
    op.drop_table("likes")
    op.drop_table("gif_hashtags")
    op.drop_table("hashtags")
    op.drop_table("gifs")
    op.drop_table("jwt_denylist")
    op.drop_table("users")
