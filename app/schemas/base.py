import uuid
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


def _to_ids(value: Any) -> Any:
    """Collapse a loaded relationship collection to the ids of its members."""
    if value is None:
        return []
    return [getattr(item, "id", item) for item in value]


# Reference lists rendered as bare ids
IdList = Annotated[list[str], BeforeValidator(_to_ids)]
UserIdList = Annotated[list[uuid.UUID], BeforeValidator(_to_ids)]


class MessageOut(BaseModel):
    message: str


# --- Populated reference schemas ---


class UserSummary(BaseSchema):
    """Display fields of a referenced user."""

    id: uuid.UUID
    username: str
    profile_pic_url: str | None = None


class ChannelSummary(BaseSchema):
    """Display fields of a referenced channel."""

    id: str
    channel_handle: str
    channel_name: str
    banner_url: str | None = None
