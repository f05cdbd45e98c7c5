from __future__ import annotations
from typing import TYPE_CHECKING
from datetime import datetime, timezone

from fastapi_users.db import SQLAlchemyBaseUserTableUUID
from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.db.models.channel import Channel


class User(SQLAlchemyBaseUserTableUUID, Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(64), nullable=False)
    profile_pic_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    profile_pic_public_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, comment="Media store handle used for deletion"
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

    # At most one element: a user owns zero or one channel.
    channels: Mapped[list["Channel"]] = relationship(
        back_populates="owner", passive_deletes=True, lazy="selectin"
    )

    subscriptions: Mapped[list["Channel"]] = relationship(
        secondary="channel_subscriptions",
        primaryjoin="User.id == channel_subscriptions.c.user_id",
        secondaryjoin="Channel.id == channel_subscriptions.c.channel_id",
        order_by="channel_subscriptions.c.created_at",
        viewonly=True,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
