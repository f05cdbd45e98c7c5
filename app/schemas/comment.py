from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, StringConstraints
from .base import BaseSchema, UserSummary

CommentText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# --- Input Schemas ---


class CommentCreate(BaseModel):
    text: CommentText


class CommentUpdate(BaseModel):
    """A missing or blank text keeps the current one."""

    text: str | None = None


# --- Output Schemas ---


class CommentOut(BaseSchema):
    id: str
    text: str
    video_id: str
    author: UserSummary
    created_at: datetime
    updated_at: datetime


class CommentMessageOut(BaseModel):
    message: str
    comment: CommentOut
