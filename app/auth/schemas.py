import uuid
from datetime import datetime

from fastapi_users import schemas
from pydantic import BaseModel, EmailStr, Field

from app.schemas.base import ChannelSummary, IdList


class UserRead(schemas.BaseUser[uuid.UUID]):
    """A user as returned by the API. The password hash is never included."""

    username: str
    profile_pic_url: str | None = None
    created_at: datetime
    channels: list[ChannelSummary] = []
    subscriptions: IdList = []


class UserCreate(schemas.BaseUserCreate):
    username: str = Field(..., min_length=1, max_length=64)
    profile_pic_url: str | None = None
    profile_pic_public_id: str | None = None


class UserUpdate(schemas.BaseUserUpdate):
    username: str | None = Field(None, min_length=1, max_length=64)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterOut(BaseModel):
    message: str
    user: UserRead


class LoginOut(BaseModel):
    message: str
    token: str
    user: UserRead
