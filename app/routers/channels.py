from fastapi import APIRouter, File, Form, UploadFile, status

from ..clients.media_store import MediaKind
from ..dependencies import CurrentUserDep, DBSessionDep, MediaStoreDep
from ..schemas.base import MessageOut
from ..schemas.channel import ChannelCreate, ChannelOut, ChannelPage, ChannelUpdate
from ..services import channel_service, media_service

router = APIRouter(prefix="/api/channels", tags=["Channels"])


@router.post("", response_model=ChannelOut, status_code=status.HTTP_201_CREATED)
async def create_channel(
    db_session: DBSessionDep,
    media_store: MediaStoreDep,
    user: CurrentUserDep,
    channel_name: str = Form(..., min_length=1, max_length=255),
    description: str | None = Form(None),
    banner: UploadFile | None = File(None),
):
    """
    Creates the caller's channel. A user can own only one channel.
    - The optional banner image is uploaded to the media store first.
    """
    banner_data = await media_service.read_upload(banner, MediaKind.BANNER)
    return await channel_service.create_channel(
        ChannelCreate(channel_name=channel_name, description=description),
        owner_id=user.id,
        db_session=db_session,
        media_store=media_store,
        banner=banner_data,
    )


@router.get("/{channel_id}", response_model=ChannelPage)
async def get_channel(channel_id: str, db_session: DBSessionDep):
    """
    Retrieves a channel together with its videos, newest first.
    """
    return await channel_service.get_channel_page(channel_id, db_session)


@router.put("/{channel_id}", response_model=ChannelOut)
async def update_channel(
    channel_id: str,
    db_session: DBSessionDep,
    media_store: MediaStoreDep,
    user: CurrentUserDep,
    channel_name: str | None = Form(None, max_length=255),
    description: str | None = Form(None),
    banner: UploadFile | None = File(None),
):
    banner_data = await media_service.read_upload(banner, MediaKind.BANNER)
    return await channel_service.update_channel(
        channel_id,
        ChannelUpdate(channel_name=channel_name, description=description),
        actor_id=user.id,
        db_session=db_session,
        media_store=media_store,
        banner=banner_data,
    )


@router.delete("/{channel_id}", response_model=MessageOut)
async def delete_channel(
    channel_id: str,
    db_session: DBSessionDep,
    media_store: MediaStoreDep,
    user: CurrentUserDep,
):
    """
    Deletes the caller's channel.
    All of its videos, their comments and their media are deleted with it.
    """
    await channel_service.delete_channel(channel_id, user.id, db_session, media_store)
    return {"message": "Channel and all associated videos deleted successfully"}


@router.post("/{channel_id}/subscribe", response_model=ChannelOut)
async def toggle_subscription(
    channel_id: str, db_session: DBSessionDep, user: CurrentUserDep
):
    """
    Subscribes the caller to the channel, or unsubscribes if already subscribed.
    """
    return await channel_service.toggle_subscription(channel_id, user.id, db_session)
