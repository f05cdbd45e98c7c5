import uuid
from datetime import datetime
from pydantic import BaseModel, Field
from .base import BaseSchema, IdList, UserIdList, UserSummary
from .video import VideoOut

# --- Input Schemas ---


class ChannelCreate(BaseModel):
    """Schema for creating the caller's channel."""

    channel_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class ChannelUpdate(BaseModel):
    """Schema for editing a channel. Omitted or empty values are left unchanged."""

    channel_name: str | None = Field(None, max_length=255)
    description: str | None = None


# --- Output Schemas ---


class ChannelOut(BaseSchema):
    """Schema for returning a channel from the API."""

    id: str
    channel_handle: str
    channel_name: str
    description: str | None
    banner_url: str | None
    owner_id: uuid.UUID
    owner: UserSummary
    subscribers: int
    subscribers_list: UserIdList = []
    videos: IdList = []
    created_at: datetime
    updated_at: datetime


class ChannelPage(BaseModel):
    """A channel together with its videos."""

    channel: ChannelOut
    videos: list[VideoOut]

