import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import ForbiddenError, NotFoundError
from ..db.crud import crud_comment, crud_video
from ..db.models.comment import Comment
from ..schemas.comment import CommentCreate, CommentUpdate

logger = logging.getLogger(__name__)


async def _get_comment_on_video(
    video_id: str, comment_id: str, db_session: AsyncSession
) -> Comment:
    comment = await crud_comment.get_comments(db_session, id=comment_id, first=True)
    # A comment addressed through another video's path does not exist there
    if not comment or comment.video_id != video_id:
        raise NotFoundError("Comment not found")
    return comment


async def get_comments_for_video(video_id: str, db_session: AsyncSession) -> list[Comment]:
    """
    Lists a video's comments, newest first, with their authors.
    """
    return await crud_comment.get_comments(db_session, video_id=video_id)


async def add_comment(
    video_id: str,
    payload: CommentCreate,
    author_id: uuid.UUID,
    db_session: AsyncSession,
) -> Comment:
    video = await crud_video.get_videos(db_session, id=video_id, first=True)
    if not video:
        raise NotFoundError("Video not found")

    comment = Comment(
        id=str(uuid.uuid4()),
        text=payload.text,
        author_id=author_id,
        video_id=video.id,
    )
    await crud_comment.create_comment(db_session, comment)
    logger.debug("User %s commented on video %s", author_id, video_id)
    return await crud_comment.get_comments(db_session, id=comment.id, first=True)


async def edit_comment(
    video_id: str,
    comment_id: str,
    payload: CommentUpdate,
    actor_id: uuid.UUID,
    db_session: AsyncSession,
) -> Comment:
    """
    Replaces the comment's text. Only the author may edit; blank text keeps
    the current one.
    """
    comment = await _get_comment_on_video(video_id, comment_id, db_session)
    if comment.author_id != actor_id:
        raise ForbiddenError("Unauthorized to edit this comment")

    if payload.text and payload.text.strip():
        comment.text = payload.text.strip()
    await crud_comment.update_comment(db_session, comment)
    return await crud_comment.get_comments(db_session, id=comment.id, first=True)


async def delete_comment(
    video_id: str,
    comment_id: str,
    actor_id: uuid.UUID,
    db_session: AsyncSession,
) -> None:
    comment = await _get_comment_on_video(video_id, comment_id, db_session)
    if comment.author_id != actor_id:
        raise ForbiddenError("Unauthorized to delete this comment")
    await crud_comment.delete_comment(db_session, comment)
