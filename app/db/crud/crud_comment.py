import uuid
from typing import Literal
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from ..models.comment import Comment
from .crud_base import (
    base_get,
    _validate_pagination,
    _validate_order_by_field,
)

COMMENT_LOAD_OPTIONS = (selectinload(Comment.author),)


async def get_comments(
    db: AsyncSession,
    *,
    # model params
    id: str | None = None,
    video_id: str | list[str] | None = None,
    author_id: uuid.UUID | None = None,
    # Pagination
    limit: int | None = None,
    offset: int = 0,
    # Ordering
    order_by: str = "created_at",
    order_direction: Literal["asc", "desc"] = "desc",
    # Return type control
    first: bool = False,
) -> list[Comment] | Comment | None:
    """
    Retrieve comments, newest first by default, with their authors populated.

    Args:
        id: Filter by comment ID
        video_id: Single video ID or list of video IDs for IN clause
        author_id: Filter by authoring user
        limit: Maximum number of results (None = unlimited)
        offset: Number of results to skip (for pagination)
        order_by: Field to order by
        order_direction: Sort direction ('asc' or 'desc')
        first: If True, return single Comment or None instead of list
    """
    _validate_pagination(limit, offset)

    if order_direction not in ("asc", "desc"):
        raise ValueError("order_direction must be 'asc' or 'desc'")

    _validate_order_by_field(Comment, order_by)

    filters = {}
    if id is not None:
        filters["id"] = id
    if video_id is not None:
        filters["video_id"] = video_id
    if author_id is not None:
        filters["author_id"] = author_id

    return await base_get(
        db,
        Comment,
        filters=filters,
        limit=limit,
        offset=offset,
        order_by=order_by,
        order_direction=order_direction,
        first=first,
        options=COMMENT_LOAD_OPTIONS,
    )


async def create_comment(db_session: AsyncSession, comment_to_create: Comment) -> Comment:
    """
    Creates a new comment in the database.
    """
    db_session.add(comment_to_create)
    await db_session.commit()
    return comment_to_create


async def update_comment(db_session: AsyncSession, comment: Comment) -> Comment:
    """
    Persists changes made to a comment instance.
    """
    await db_session.commit()
    return comment


async def delete_comment(db_session: AsyncSession, comment_to_delete: Comment) -> None:
    """
    Deletes a specific comment instance from the database.
    """
    await db_session.delete(comment_to_delete)
    await db_session.commit()


async def delete_comments_for_videos(
    db_session: AsyncSession, video_ids: list[str]
) -> int:
    """
    Bulk-deletes every comment on the given videos without committing.

    Returns:
        Number of comments deleted
    """
    if not video_ids:
        return 0
    result = await db_session.execute(
        delete(Comment).where(Comment.video_id.in_(video_ids))
    )
    return result.rowcount
