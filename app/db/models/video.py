from __future__ import annotations
from typing import TYPE_CHECKING
from datetime import datetime, timezone
import uuid

from fastapi_users_db_sqlalchemy.generics import GUID
from sqlalchemy import (
    String,
    Text,
    DateTime,
    Integer,
    ForeignKey,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..base import Base
from .association_tables import video_reactions

if TYPE_CHECKING:
    from app.auth.models import User
    from .channel import Channel
    from .comment import Comment


class Video(Base):
    __tablename__ = "videos"
    __table_args__ = (
        Index("ix_video_channel_created", "channel_id", "created_at"),
        CheckConstraint("views >= 0", name="ck_videos_views_non_negative"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, comment="UUID as string"
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    video_url: Mapped[str] = mapped_column(String(512), nullable=False)
    video_public_id: Mapped[str] = mapped_column(String(255), nullable=False)
    thumbnail_url: Mapped[str] = mapped_column(String(512), nullable=False)
    thumbnail_public_id: Mapped[str] = mapped_column(String(255), nullable=False)
    duration: Mapped[int | None] = mapped_column(
        Integer, nullable=True, comment="Seconds, reported by the media store"
    )
    views: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    uploader_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    channel_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("channels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    uploader: Mapped["User"] = relationship()
    channel: Mapped["Channel"] = relationship(back_populates="videos")

    comments: Mapped[list["Comment"]] = relationship(
        back_populates="video",
        passive_deletes=True,
        order_by="Comment.created_at.desc()",
    )

    # Read-only views over video_reactions, split by kind
    likes: Mapped[list["User"]] = relationship(
        secondary=video_reactions,
        primaryjoin="Video.id == video_reactions.c.video_id",
        secondaryjoin="and_(User.id == video_reactions.c.user_id, video_reactions.c.kind == 'like')",
        order_by=video_reactions.c.created_at,
        viewonly=True,
    )
    dislikes: Mapped[list["User"]] = relationship(
        secondary=video_reactions,
        primaryjoin="Video.id == video_reactions.c.video_id",
        secondaryjoin="and_(User.id == video_reactions.c.user_id, video_reactions.c.kind == 'dislike')",
        order_by=video_reactions.c.created_at,
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, title='{self.title}')>"
