from __future__ import annotations
from typing import TYPE_CHECKING
import uuid

from fastapi_users_db_sqlalchemy.generics import GUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import DateTime, ForeignKey, Integer, Text, String
from datetime import datetime, timezone
from ..base import Base
from .association_tables import channel_subscriptions

if TYPE_CHECKING:
    from app.auth.models import User
    from .video import Video


class Channel(Base):
    __tablename__ = "channels"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, comment="UUID as string"
    )
    channel_handle: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        index=True,
        comment="Public channel identifier (12 url-safe characters)",
    )
    channel_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    banner_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    banner_public_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, comment="Media store handle used for deletion"
    )

    # Unique: a user owns at most one channel
    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    # Projection of len(subscribers_list), always recomputed from the association rows
    subscribers: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    owner: Mapped["User"] = relationship(back_populates="channels")

    subscribers_list: Mapped[list["User"]] = relationship(
        secondary=channel_subscriptions,
        primaryjoin="Channel.id == channel_subscriptions.c.channel_id",
        secondaryjoin="User.id == channel_subscriptions.c.user_id",
        order_by=channel_subscriptions.c.created_at,
        viewonly=True,
    )

    videos: Mapped[list["Video"]] = relationship(
        back_populates="channel",
        passive_deletes=True,
        order_by="Video.created_at",
    )

    def __repr__(self) -> str:
        return f"<Channel(id={self.id}, channel_name='{self.channel_name}')>"
