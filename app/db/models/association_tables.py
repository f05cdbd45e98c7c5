"""
Association tables for many-to-many relationships.

These tables are defined separately from the models to avoid circular import issues.
They are the single source of truth for subscriptions and reactions: both sides
of each relationship are read-only views over these rows.
"""

from datetime import datetime, timezone

from fastapi_users_db_sqlalchemy.generics import GUID
from sqlalchemy import (
    Table,
    Column,
    String,
    DateTime,
    ForeignKey,
    CheckConstraint,
)
from ..base import Base

REACTION_LIKE = "like"
REACTION_DISLIKE = "dislike"

# Many-to-many association table for User ↔ Channel subscriptions
channel_subscriptions = Table(
    "channel_subscriptions",
    Base.metadata,
    Column(
        "channel_id",
        String(36),
        ForeignKey("channels.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        GUID,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    ),
)

# One reaction per (video, user); the primary key keeps likes and dislikes disjoint
video_reactions = Table(
    "video_reactions",
    Base.metadata,
    Column(
        "video_id",
        String(36),
        ForeignKey("videos.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        GUID,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("kind", String(8), nullable=False),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    ),
    CheckConstraint(
        f"kind IN ('{REACTION_LIKE}', '{REACTION_DISLIKE}')",
        name="ck_video_reactions_kind",
    ),
)
