import uuid

from pydantic import BaseModel, Field
from datetime import datetime
from .base import BaseSchema, ChannelSummary, IdList, UserIdList, UserSummary
from .comment import CommentOut

# --- Input Schemas ---


class VideoCreate(BaseModel):
    """Metadata sent alongside the video and thumbnail files."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    category: str = Field(..., min_length=1, max_length=64)


class VideoUpdate(BaseModel):
    """Schema for editing video metadata. Omitted or empty values are left unchanged."""

    title: str | None = Field(None, max_length=255)
    description: str | None = None
    category: str | None = Field(None, max_length=64)


# --- Output Schemas ---


class VideoOut(BaseSchema):
    """Schema for returning a video from the API."""

    id: str
    title: str
    description: str | None
    category: str
    video_url: str
    thumbnail_url: str
    duration: int | None
    views: int
    uploader_id: uuid.UUID
    uploader: UserSummary
    channel: ChannelSummary
    likes: UserIdList = []
    dislikes: UserIdList = []
    comments: IdList = []
    created_at: datetime
    updated_at: datetime


class VideoDetailOut(VideoOut):
    """A single video with its comments (newest first) populated."""

    comments: list[CommentOut] = []


class VideoUploadOut(BaseModel):
    message: str
    video: VideoOut
