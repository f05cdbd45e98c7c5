import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..clients.media_store import MediaKind, MediaStore
from ..core.errors import (
    ForbiddenError,
    MediaUploadError,
    NotFoundError,
    ValidationError,
)
from ..db.crud import crud_channel, crud_comment, crud_video
from ..db.models.association_tables import REACTION_DISLIKE, REACTION_LIKE
from ..db.models.video import Video
from ..schemas.video import VideoCreate, VideoUpdate
from . import media_service

logger = logging.getLogger(__name__)


def _ensure_uploader(video: Video, actor_id: uuid.UUID, action: str) -> None:
    if video.uploader_id != actor_id:
        raise ForbiddenError(f"Unauthorized to {action} this video")


async def get_video_by_id(
    video_id: str, db_session: AsyncSession, detail: bool = False
) -> Video:
    """
    Retrieves a video by its ID, raising a 404 error if not found.
    With detail=True the comments come back with their authors.
    """
    video = await crud_video.get_videos(
        db_session, id=video_id, first=True, detail=detail
    )
    if not video:
        raise NotFoundError("Video not found")
    return video


async def get_all_videos(
    db_session: AsyncSession,
    category: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Video]:
    """All videos, newest first, optionally narrowed to one category."""
    return await crud_video.get_videos(
        db_session, category=category, limit=limit, offset=offset
    )


async def search_videos(q: str | None, db_session: AsyncSession) -> list[Video]:
    """
    Case-insensitive match of `q` against title or description.
    """
    if q is None or not q.strip():
        raise ValidationError("Search query is required")
    return await crud_video.get_videos(db_session, q=q)


async def upload_video(
    payload: VideoCreate,
    uploader_id: uuid.UUID,
    db_session: AsyncSession,
    media_store: MediaStore,
    video_file: bytes | None,
    thumbnail_file: bytes | None,
) -> Video:
    """
    Orchestrates publishing a video on the uploader's channel.
    1. Requires both files and an existing channel.
    2. Uploads the video, then the thumbnail. If the thumbnail fails the
       video upload is released.
    3. Writes the row. If that fails both uploads are released.
    """
    if video_file is None or thumbnail_file is None:
        raise ValidationError("Video and thumbnail files are required.")

    channel = await crud_channel.get_channels(
        db_session, owner_id=uploader_id, first=True
    )
    if not channel:
        raise NotFoundError("Channel not found for the user.")

    video_upload = await media_store.upload(video_file, MediaKind.VIDEO)
    try:
        thumbnail_upload = await media_store.upload(thumbnail_file, MediaKind.THUMBNAIL)
    except MediaUploadError:
        await media_service.discard_uploads(
            media_store, db_session, [(video_upload, MediaKind.VIDEO)], "thumbnail upload failed"
        )
        raise

    new_video = Video(
        id=str(uuid.uuid4()),
        title=payload.title,
        description=payload.description,
        category=payload.category,
        video_url=video_upload.url,
        video_public_id=video_upload.public_id,
        thumbnail_url=thumbnail_upload.url,
        thumbnail_public_id=thumbnail_upload.public_id,
        duration=video_upload.duration_seconds,
        views=0,
        uploader_id=uploader_id,
        channel_id=channel.id,
    )

    try:
        await crud_video.create_video(db_session, new_video)
    except Exception:
        await db_session.rollback()
        await media_service.discard_uploads(
            media_store,
            db_session,
            [(video_upload, MediaKind.VIDEO), (thumbnail_upload, MediaKind.THUMBNAIL)],
            "video create failed",
        )
        raise

    logger.info("User %s uploaded video %s to channel %s", uploader_id, new_video.id, channel.id)
    return await get_video_by_id(new_video.id, db_session)


async def update_video(
    video_id: str,
    payload: VideoUpdate,
    actor_id: uuid.UUID,
    db_session: AsyncSession,
    media_store: MediaStore,
    video_file: bytes | None = None,
    thumbnail_file: bytes | None = None,
) -> Video:
    """
    Updates a video's metadata and, optionally, its media. Replaced media is
    released after the new handles are committed.
    """
    video = await get_video_by_id(video_id, db_session)
    _ensure_uploader(video, actor_id, "update")

    uploads = []
    if video_file is not None:
        uploads.append((await media_store.upload(video_file, MediaKind.VIDEO), MediaKind.VIDEO))
    if thumbnail_file is not None:
        try:
            thumbnail_upload = await media_store.upload(thumbnail_file, MediaKind.THUMBNAIL)
        except MediaUploadError:
            await media_service.discard_uploads(
                media_store, db_session, uploads, "thumbnail upload failed"
            )
            raise
        uploads.append((thumbnail_upload, MediaKind.THUMBNAIL))

    replaced = []
    for uploaded, kind in uploads:
        if kind == MediaKind.VIDEO:
            replaced.append((video.video_public_id, kind))
            video.video_url = uploaded.url
            video.video_public_id = uploaded.public_id
            if uploaded.duration_seconds is not None:
                video.duration = uploaded.duration_seconds
        else:
            replaced.append((video.thumbnail_public_id, kind))
            video.thumbnail_url = uploaded.url
            video.thumbnail_public_id = uploaded.public_id

    if payload.title:
        video.title = payload.title
    if payload.description:
        video.description = payload.description
    if payload.category:
        video.category = payload.category

    try:
        await db_session.commit()
    except Exception:
        await db_session.rollback()
        await media_service.discard_uploads(
            media_store, db_session, uploads, "video update failed"
        )
        raise

    if replaced:
        await media_service.release_media(
            media_store, db_session, replaced, f"media of video {video_id} replaced"
        )
        await db_session.commit()

    return await get_video_by_id(video_id, db_session)


async def delete_video(
    video_id: str,
    actor_id: uuid.UUID,
    db_session: AsyncSession,
    media_store: MediaStore,
) -> None:
    """
    Deletes a video, its comments and reactions. Both media objects are
    released after the commit.
    """
    video = await get_video_by_id(video_id, db_session)
    _ensure_uploader(video, actor_id, "delete")

    media = [
        (video.video_public_id, MediaKind.VIDEO),
        (video.thumbnail_public_id, MediaKind.THUMBNAIL),
    ]

    deleted_comments = await crud_comment.delete_comments_for_videos(db_session, [video.id])
    await crud_video.delete_videos(db_session, [video.id])
    await db_session.commit()
    logger.info("Deleted video %s with %d comments", video_id, deleted_comments)

    failed = await media_service.release_media(
        media_store, db_session, media, f"video {video_id} deleted"
    )
    if failed:
        await db_session.commit()


async def _toggle_reaction(
    video_id: str, user_id: uuid.UUID, kind: str, db_session: AsyncSession
) -> Video:
    # Same kind again undoes it; the other kind is replaced
    video = await get_video_by_id(video_id, db_session)

    current = await crud_video.get_reaction(db_session, video.id, user_id)
    if current == kind:
        await crud_video.clear_reaction(db_session, video.id, user_id)
    else:
        await crud_video.set_reaction(db_session, video.id, user_id, kind)

    try:
        await db_session.commit()
    except IntegrityError:
        await db_session.rollback()
        logger.info("Concurrent %s by user %s on video %s", kind, user_id, video_id)

    return await get_video_by_id(video_id, db_session)


async def like_video(
    video_id: str, user_id: uuid.UUID, db_session: AsyncSession
) -> Video:
    return await _toggle_reaction(video_id, user_id, REACTION_LIKE, db_session)


async def dislike_video(
    video_id: str, user_id: uuid.UUID, db_session: AsyncSession
) -> Video:
    return await _toggle_reaction(video_id, user_id, REACTION_DISLIKE, db_session)


async def increase_views(video_id: str, db_session: AsyncSession) -> Video:
    """
    Counts one view. Every call counts; repeat views are not deduplicated.
    """
    updated = await crud_video.increment_views(db_session, video_id)
    if not updated:
        raise NotFoundError("Video not found")
    return await get_video_by_id(video_id, db_session)
