"""Initial database schema

Revision ID: 001
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def _profile_table(name, *columns, constraints=()):
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *columns,
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        *constraints,
    )
    op.create_index(op.f(f"ix_{name}_user_id"), name, ["user_id"], unique=True)


def upgrade() -> None:
    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("external_id", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column(
            "kind",
            sa.Enum("INDIVIDUAL", "GYM", "BRAND", name="user_kind"),
            nullable=True,
        ),
        sa.Column("follower_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("following_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("onboarding_complete", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_premium", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("follower_count >= 0", name="ck_users_follower_count"),
        sa.CheckConstraint("following_count >= 0", name="ck_users_following_count"),
    )
    op.create_index(op.f("ix_users_external_id"), "users", ["external_id"], unique=True)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=False)
    op.create_index(op.f("ix_users_kind"), "users", ["kind"], unique=False)
    op.create_index(
        op.f("ix_users_follower_count"), "users", ["follower_count"], unique=False
    )

    # Create profile tables, one per user kind
    _profile_table(
        "individual_profiles",
        sa.Column("stats", sa.JSON(), nullable=True),
        sa.Column("experiences", sa.JSON(), nullable=True),
        sa.Column("certifications", sa.JSON(), nullable=True),
        sa.Column("affiliation", sa.String(length=255), nullable=True),
        sa.Column("social_links", sa.JSON(), nullable=True),
        sa.Column("is_training_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("training_price", sa.Float(), nullable=True),
        sa.Column("activity_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_activity_update", sa.DateTime(timezone=True), nullable=False),
        constraints=(
            sa.CheckConstraint("activity_score >= 0", name="ck_individual_activity_score"),
        ),
    )
    op.create_index(
        "idx_individual_ranking",
        "individual_profiles",
        ["activity_score", "last_activity_update"],
        unique=False,
    )
    op.create_index(
        op.f("ix_individual_profiles_is_training_enabled"),
        "individual_profiles",
        ["is_training_enabled"],
        unique=False,
    )
    _profile_table(
        "gym_profiles",
        sa.Column("business_info", sa.JSON(), nullable=True),
        sa.Column("amenities", sa.JSON(), nullable=True),
        sa.Column("membership_plans", sa.JSON(), nullable=True),
        sa.Column("stats", sa.JSON(), nullable=True),
        sa.Column("verification", sa.JSON(), nullable=True),
    )
    _profile_table(
        "brand_profiles",
        sa.Column("business_info", sa.JSON(), nullable=True),
        sa.Column("partnerships", sa.JSON(), nullable=True),
        sa.Column("campaigns", sa.JSON(), nullable=True),
        sa.Column("verification", sa.JSON(), nullable=True),
    )

    # Create follow_edges table
    op.create_table(
        "follow_edges",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("follower_id", sa.Integer(), nullable=False),
        sa.Column("following_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["follower_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["following_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follow_edge"),
        sa.CheckConstraint("follower_id <> following_id", name="ck_follow_not_self"),
    )
    op.create_index("idx_follow_follower", "follow_edges", ["follower_id"], unique=False)
    op.create_index("idx_follow_following", "follow_edges", ["following_id"], unique=False)

    # Create activity_transactions table
    op.create_table(
        "activity_transactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "activity_kind",
            sa.Enum(
                "WORKOUT_POSTED",
                "EVENT_CREATED",
                "EVENT_JOINED",
                "FOLLOWER_GAINED",
                "PROFILE_COMPLETED",
                "WEEKLY_STREAK",
                "MONTHLY_MILESTONE",
                "COMMUNITY_INTERACTION",
                "ACHIEVEMENT_UNLOCKED",
                "MANUAL_ADJUSTMENT",
                name="activity_kind",
            ),
            nullable=False,
        ),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("related_id", sa.String(length=255), nullable=True),
        sa.Column("activity_metadata", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_activity_transactions_activity_kind"),
        "activity_transactions",
        ["activity_kind"],
        unique=False,
    )
    op.create_index(
        "idx_activity_user_created",
        "activity_transactions",
        ["user_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "idx_activity_created", "activity_transactions", ["created_at"], unique=False
    )

    # Create training_requests table
    op.create_table(
        "training_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("requester_id", sa.Integer(), nullable=False),
        sa.Column("trainer_id", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "ACCEPTED", "REJECTED", name="training_request_status"),
            nullable=False,
        ),
        sa.Column("message", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["requester_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["trainer_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("requester_id", "trainer_id", name="uq_training_request_pair"),
    )
    op.create_index(
        op.f("ix_training_requests_requester_id"),
        "training_requests",
        ["requester_id"],
        unique=False,
    )
    op.create_index(
        "idx_training_trainer_status",
        "training_requests",
        ["trainer_id", "status"],
        unique=False,
    )

    # Create posts, likes and comments tables
    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("media_url", sa.String(length=1000), nullable=True),
        sa.Column("media_public_id", sa.String(length=255), nullable=True),
        sa.Column("media_type", sa.Enum("IMAGE", "VIDEO", name="media_type"), nullable=True),
        sa.Column(
            "privacy",
            sa.Enum("PUBLIC", "FRIENDS", "PRIVATE", name="post_privacy"),
            nullable=False,
        ),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comment_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_posts_user_id"), "posts", ["user_id"], unique=False)
    op.create_index(
        "idx_post_privacy_created", "posts", ["privacy", "created_at"], unique=False
    )
    op.create_index("idx_post_user_privacy", "posts", ["user_id", "privacy"], unique=False)

    op.create_table(
        "likes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_like_user_post"),
    )
    op.create_index(op.f("ix_likes_user_id"), "likes", ["user_id"], unique=False)
    op.create_index(op.f("ix_likes_post_id"), "likes", ["post_id"], unique=False)

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_comments_user_id"), "comments", ["user_id"], unique=False)
    op.create_index(
        "idx_comment_post_created", "comments", ["post_id", "created_at"], unique=False
    )

    # Create chats, chat_members and messages tables
    op.create_table(
        "chats",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "creation_reason",
            sa.Enum(
                "TRAIN_REQUEST",
                "MUTUAL_FOLLOW",
                "DIRECT_MESSAGE",
                name="chat_creation_reason",
            ),
            nullable=False,
        ),
        sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_message_preview", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_chats_last_message_at"), "chats", ["last_message_at"], unique=False
    )

    op.create_table(
        "chat_members",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("chat_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["chat_id"], ["chats.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("chat_id", "user_id", name="uq_chat_member"),
    )
    op.create_index(op.f("ix_chat_members_chat_id"), "chat_members", ["chat_id"], unique=False)
    op.create_index(op.f("ix_chat_members_user_id"), "chat_members", ["user_id"], unique=False)

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("chat_id", sa.Integer(), nullable=False),
        sa.Column("sender_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("read_by", sa.JSON(), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_edited", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_system_message", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["chat_id"], ["chats.id"]),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_messages_sender_id"), "messages", ["sender_id"], unique=False)
    op.create_index(
        "idx_message_chat_created", "messages", ["chat_id", "created_at"], unique=False
    )

    # Create events and event_rsvps tables
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("creator_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("location", sa.JSON(), nullable=True),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        sa.Column(
            "event_type",
            sa.Enum("WORKOUT", "COMPETITION", "MEETUP", "SEMINAR", name="event_type"),
            nullable=False,
        ),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("rsvp_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["creator_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_events_creator_id"), "events", ["creator_id"], unique=False)
    op.create_index(op.f("ix_events_starts_at"), "events", ["starts_at"], unique=False)
    op.create_index(
        "idx_event_public_starts", "events", ["is_public", "starts_at"], unique=False
    )

    op.create_table(
        "event_rsvps",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("GOING", "MAYBE", "NOT_GOING", name="rsvp_status"),
            nullable=False,
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_rsvp"),
    )
    op.create_index(op.f("ix_event_rsvps_event_id"), "event_rsvps", ["event_id"], unique=False)
    op.create_index(op.f("ix_event_rsvps_user_id"), "event_rsvps", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_table("event_rsvps")
    op.drop_table("events")
    op.drop_table("messages")
    op.drop_table("chat_members")
    op.drop_table("chats")
    op.drop_table("comments")
    op.drop_table("likes")
    op.drop_table("posts")
    op.drop_table("training_requests")
    op.drop_table("activity_transactions")
    op.drop_table("follow_edges")
    op.drop_table("brand_profiles")
    op.drop_table("gym_profiles")
    op.drop_table("individual_profiles")
    op.drop_table("users")

    for enum_name in (
        "rsvp_status",
        "event_type",
        "chat_creation_reason",
        "post_privacy",
        "media_type",
        "training_request_status",
        "activity_kind",
        "user_kind",
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
