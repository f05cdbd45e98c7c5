from fastapi import APIRouter, File, Form, Query, UploadFile, status

from ..clients.media_store import MediaKind
from ..dependencies import CurrentUserDep, DBSessionDep, MediaStoreDep
from ..schemas.base import MessageOut
from ..schemas.video import (
    VideoCreate,
    VideoDetailOut,
    VideoOut,
    VideoUpdate,
    VideoUploadOut,
)
from ..services import media_service, video_service

router = APIRouter(prefix="/api/videos", tags=["Videos"])


@router.get("", response_model=list[VideoOut])
async def list_videos(
    db_session: DBSessionDep,
    category: str | None = Query(None, description="Filter by category"),
    limit: int | None = Query(None, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """
    Lists videos, newest first.

    Filters:
    - category: Show only videos in one category
    - limit / offset: Optional paging; all videos are returned by default
    """
    return await video_service.get_all_videos(
        db_session, category=category, limit=limit, offset=offset
    )


# Declared before /{video_id} so "search" is not taken for an id
@router.get("/search", response_model=list[VideoOut])
async def search_videos(
    db_session: DBSessionDep,
    q: str | None = Query(None, description="Text to find in title or description"),
):
    return await video_service.search_videos(q, db_session)


@router.post(
    "/upload", response_model=VideoUploadOut, status_code=status.HTTP_201_CREATED
)
async def upload_video(
    db_session: DBSessionDep,
    media_store: MediaStoreDep,
    user: CurrentUserDep,
    title: str = Form(..., min_length=1, max_length=255),
    category: str = Form(..., min_length=1, max_length=64),
    description: str | None = Form(None),
    video: UploadFile | None = File(None),
    thumbnail: UploadFile | None = File(None),
):
    """
    Publishes a video on the caller's channel.
    - Both the video and the thumbnail file are required.
    """
    video_data = await media_service.read_upload(video, MediaKind.VIDEO)
    thumbnail_data = await media_service.read_upload(thumbnail, MediaKind.THUMBNAIL)
    new_video = await video_service.upload_video(
        VideoCreate(title=title, description=description, category=category),
        uploader_id=user.id,
        db_session=db_session,
        media_store=media_store,
        video_file=video_data,
        thumbnail_file=thumbnail_data,
    )
    return {"message": "Video uploaded successfully", "video": new_video}


@router.get("/{video_id}", response_model=VideoDetailOut)
async def get_video(video_id: str, db_session: DBSessionDep):
    """
    Retrieves a single video with its comments, newest first.
    """
    return await video_service.get_video_by_id(video_id, db_session, detail=True)


@router.put("/{video_id}", response_model=VideoOut)
async def update_video(
    video_id: str,
    db_session: DBSessionDep,
    media_store: MediaStoreDep,
    user: CurrentUserDep,
    title: str | None = Form(None, max_length=255),
    description: str | None = Form(None),
    category: str | None = Form(None, max_length=64),
    video: UploadFile | None = File(None),
    thumbnail: UploadFile | None = File(None),
):
    video_data = await media_service.read_upload(video, MediaKind.VIDEO)
    thumbnail_data = await media_service.read_upload(thumbnail, MediaKind.THUMBNAIL)
    return await video_service.update_video(
        video_id,
        VideoUpdate(title=title, description=description, category=category),
        actor_id=user.id,
        db_session=db_session,
        media_store=media_store,
        video_file=video_data,
        thumbnail_file=thumbnail_data,
    )


@router.delete("/{video_id}", response_model=MessageOut)
async def delete_video(
    video_id: str,
    db_session: DBSessionDep,
    media_store: MediaStoreDep,
    user: CurrentUserDep,
):
    await video_service.delete_video(video_id, user.id, db_session, media_store)
    return {"message": "Video deleted successfully"}


@router.post("/{video_id}/like", response_model=VideoOut)
async def like_video(video_id: str, db_session: DBSessionDep, user: CurrentUserDep):
    """
    Likes the video, or removes the like if the caller already liked it.
    A dislike by the caller is replaced.
    """
    return await video_service.like_video(video_id, user.id, db_session)


@router.post("/{video_id}/dislike", response_model=VideoOut)
async def dislike_video(video_id: str, db_session: DBSessionDep, user: CurrentUserDep):
    return await video_service.dislike_video(video_id, user.id, db_session)


@router.patch("/{video_id}/views", response_model=VideoOut)
async def increase_views(video_id: str, db_session: DBSessionDep):
    return await video_service.increase_views(video_id, db_session)
