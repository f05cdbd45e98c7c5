import logging
import secrets
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..clients.media_store import MediaKind, MediaStore
from ..core.errors import ConflictError, ForbiddenError, NotFoundError
from ..db.crud import crud_channel, crud_comment, crud_video
from ..db.models.channel import Channel
from ..schemas.channel import ChannelCreate, ChannelUpdate
from . import media_service

logger = logging.getLogger(__name__)


def _new_channel_handle() -> str:
    """12-character url-safe public handle."""
    return secrets.token_urlsafe(9)


def _ensure_owner(channel: Channel, actor_id: uuid.UUID, action: str) -> None:
    if channel.owner_id != actor_id:
        raise ForbiddenError(f"Unauthorized to {action} this channel")


async def get_channel_by_id(channel_id: str, db_session: AsyncSession) -> Channel:
    """
    Retrieves a channel by its ID, raising a 404 error if not found.
    """
    channel = await crud_channel.get_channels(db_session, id=channel_id, first=True)
    if not channel:
        raise NotFoundError("Channel not found")
    return channel


async def get_channel_page(channel_id: str, db_session: AsyncSession) -> dict:
    """
    Returns the channel along with its videos, newest first.
    """
    channel = await get_channel_by_id(channel_id, db_session)
    videos = await crud_video.get_videos(db_session, channel_id=channel.id)
    return {"channel": channel, "videos": videos}


async def create_channel(
    payload: ChannelCreate,
    owner_id: uuid.UUID,
    db_session: AsyncSession,
    media_store: MediaStore,
    banner: bytes | None = None,
) -> Channel:
    """
    Orchestrates creating the caller's channel.
    1. Rejects owners that already have a channel.
    2. Uploads the banner, if any. A failed upload creates nothing.
    3. Writes the channel row; owner_id is the owner link.
    """
    existing = await crud_channel.get_channels(db_session, owner_id=owner_id, first=True)
    if existing:
        raise ConflictError("You already have a channel.")

    uploaded = None
    if banner is not None:
        uploaded = await media_store.upload(banner, MediaKind.BANNER)

    new_channel = Channel(
        id=str(uuid.uuid4()),
        channel_handle=_new_channel_handle(),
        channel_name=payload.channel_name,
        description=payload.description,
        banner_url=uploaded.url if uploaded else None,
        banner_public_id=uploaded.public_id if uploaded else None,
        owner_id=owner_id,
        subscribers=0,
    )

    try:
        await crud_channel.create_channel(db_session, new_channel)
    except IntegrityError as e:
        # Lost a race against another create for the same owner
        await db_session.rollback()
        if uploaded:
            await media_service.discard_uploads(
                media_store, db_session, [(uploaded, MediaKind.BANNER)], "channel create conflict"
            )
        raise ConflictError("You already have a channel.") from e
    except Exception:
        await db_session.rollback()
        if uploaded:
            await media_service.discard_uploads(
                media_store, db_session, [(uploaded, MediaKind.BANNER)], "channel create failed"
            )
        raise

    logger.info("User %s created channel %s", owner_id, new_channel.id)
    return await get_channel_by_id(new_channel.id, db_session)


async def update_channel(
    channel_id: str,
    payload: ChannelUpdate,
    actor_id: uuid.UUID,
    db_session: AsyncSession,
    media_store: MediaStore,
    banner: bytes | None = None,
) -> Channel:
    """
    Updates the channel's name, description and banner. Only the owner may do
    this. The old banner is released once the new one is committed.
    """
    channel = await get_channel_by_id(channel_id, db_session)
    _ensure_owner(channel, actor_id, "update")

    uploaded = None
    old_banner_id = None
    if banner is not None:
        uploaded = await media_store.upload(banner, MediaKind.BANNER)
        old_banner_id = channel.banner_public_id
        channel.banner_url = uploaded.url
        channel.banner_public_id = uploaded.public_id

    if payload.channel_name:
        channel.channel_name = payload.channel_name
    if payload.description:
        channel.description = payload.description

    try:
        await db_session.commit()
    except Exception:
        await db_session.rollback()
        if uploaded:
            await media_service.discard_uploads(
                media_store, db_session, [(uploaded, MediaKind.BANNER)], "channel update failed"
            )
        raise

    if old_banner_id:
        await media_service.release_media(
            media_store,
            db_session,
            [(old_banner_id, MediaKind.BANNER)],
            f"banner of channel {channel_id} replaced",
        )
        await db_session.commit()

    return await get_channel_by_id(channel_id, db_session)


async def delete_channel(
    channel_id: str,
    actor_id: uuid.UUID,
    db_session: AsyncSession,
    media_store: MediaStore,
) -> None:
    """
    Deletes a channel together with its videos, their comments and
    reactions, and its subscriptions, in one transaction. Media objects are
    released after the commit; failures are recorded as orphans and never
    undo the delete.
    """
    channel = await get_channel_by_id(channel_id, db_session)
    _ensure_owner(channel, actor_id, "delete")

    handles = await crud_video.get_media_handles(db_session, channel.id)
    video_ids = [video_id for video_id, _, _ in handles]
    banner_id = channel.banner_public_id

    deleted_comments = await crud_comment.delete_comments_for_videos(db_session, video_ids)
    deleted_videos = await crud_video.delete_videos(db_session, video_ids)
    await crud_channel.delete_channel(db_session, channel, commit=False)
    await db_session.commit()
    logger.info(
        "Deleted channel %s with %d videos and %d comments",
        channel_id,
        deleted_videos,
        deleted_comments,
    )

    media = []
    for _, video_public_id, thumbnail_public_id in handles:
        media.append((video_public_id, MediaKind.VIDEO))
        media.append((thumbnail_public_id, MediaKind.THUMBNAIL))
    media.append((banner_id, MediaKind.BANNER))

    failed = await media_service.release_media(
        media_store, db_session, media, f"channel {channel_id} deleted"
    )
    if failed:
        await db_session.commit()


async def toggle_subscription(
    channel_id: str, user_id: uuid.UUID, db_session: AsyncSession
) -> Channel:
    """
    Subscribes the user to the channel, or unsubscribes if already subscribed.
    The channel row is locked first, then the subscriber count is recomputed
    from the subscription rows in the same transaction.
    """
    channel = await get_channel_by_id(channel_id, db_session)

    if not await crud_channel.lock_channel(db_session, channel.id):
        raise NotFoundError("Channel not found")
    if await crud_channel.is_subscribed(db_session, channel.id, user_id):
        await crud_channel.remove_subscription(db_session, channel.id, user_id)
    else:
        await crud_channel.add_subscription(db_session, channel.id, user_id)
    await crud_channel.recount_subscribers(db_session, channel.id)

    try:
        await db_session.commit()
    except IntegrityError:
        # A concurrent request by the same user subscribed first
        await db_session.rollback()
        logger.info("User %s already subscribed to %s", user_id, channel_id)

    return await get_channel_by_id(channel_id, db_session)
