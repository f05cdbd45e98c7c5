import uuid
from typing import Literal, Any
from sqlalchemy import select, func, or_, delete, update, insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from ..models.video import Video
from ..models.comment import Comment
from ..models.association_tables import video_reactions
from .crud_base import (
    base_get,
    _validate_pagination,
    _validate_order_by_field,
    _validate_filter_field,
)

# References populated for list views (comment ids only)
VIDEO_LOAD_OPTIONS = (
    selectinload(Video.uploader),
    selectinload(Video.channel),
    selectinload(Video.likes),
    selectinload(Video.dislikes),
    selectinload(Video.comments),
)

# Single-video view: comments come back with their authors
VIDEO_DETAIL_LOAD_OPTIONS = (
    selectinload(Video.uploader),
    selectinload(Video.channel),
    selectinload(Video.likes),
    selectinload(Video.dislikes),
    selectinload(Video.comments).selectinload(Comment.author),
)


def _build_search_condition(q: str):
    """Case-insensitive substring match on title or description.

    User input is matched literally; LIKE wildcards in it are escaped.
    """
    needle = q.strip().lower()
    return or_(
        func.lower(Video.title).contains(needle, autoescape=True),
        func.lower(func.coalesce(Video.description, "")).contains(
            needle, autoescape=True
        ),
    )


async def get_videos(
    db: AsyncSession,
    *,
    # Explicit parameters for common filters
    id: str | list[str] | None = None,
    channel_id: str | list[str] | None = None,
    uploader_id: uuid.UUID | None = None,
    category: str | None = None,
    # Text search
    q: str | None = None,
    # Pagination
    limit: int | None = None,
    offset: int = 0,
    # Ordering
    order_by: str = "created_at",
    order_direction: Literal["asc", "desc"] = "desc",
    # Return type control
    first: bool = False,
    detail: bool = False,
    # Catch-all for any other Video field
    **kwargs: Any,
) -> list[Video] | Video | None:
    """
    Retrieve videos with flexible filtering, pagination, and ordering.

    Args:
        id: Single video ID or list of video IDs for IN clause
        channel_id: Single channel ID or list of channel IDs for IN clause
        uploader_id: Filter by uploading user
        category: Filter by exact category
        q: Search query matching title or description
        limit: Maximum number of results (None = unlimited)
        offset: Number of results to skip (for pagination)
        order_by: Field to order by
        order_direction: Sort direction ('asc' or 'desc')
        first: If True, return single Video or None instead of list
        detail: Populate comment authors as well as comment ids
        **kwargs: Additional filter fields

    Returns:
        - If first=True: Single Video instance or None
        - If first=False: List of Video instances (empty list if no matches)
    """
    _validate_pagination(limit, offset)

    if order_direction not in ("asc", "desc"):
        raise ValueError("order_direction must be 'asc' or 'desc'")

    _validate_order_by_field(Video, order_by)

    # Normalize empty search string to None
    if q is not None and q.strip() == "":
        q = None

    filters = {}
    if id is not None:
        filters["id"] = id
    if channel_id is not None:
        filters["channel_id"] = channel_id
    if uploader_id is not None:
        filters["uploader_id"] = uploader_id
    if category is not None:
        filters["category"] = category

    # Add any additional kwargs
    for key, value in kwargs.items():
        if value is not None:
            filters[key] = value

    for field_name in filters.keys():
        _validate_filter_field(Video, field_name)

    options = VIDEO_DETAIL_LOAD_OPTIONS if detail else VIDEO_LOAD_OPTIONS

    # Fast path: no search, delegate to base_get
    if q is None:
        return await base_get(
            db,
            Video,
            filters=filters,
            limit=limit,
            offset=offset,
            order_by=order_by,
            order_direction=order_direction,
            first=first,
            options=options,
        )

    query = select(Video).options(*options)
    for field_name, value in filters.items():
        column = getattr(Video, field_name)
        if isinstance(value, (list, tuple)):
            query = query.where(column.in_(value))
        else:
            query = query.where(column == value)
    query = query.where(_build_search_condition(q))

    order_column = getattr(Video, order_by)
    if order_direction == "desc":
        query = query.order_by(order_column.desc())
    else:
        query = query.order_by(order_column.asc())

    # Apply pagination
    if limit is not None:
        query = query.limit(limit)
    query = query.offset(offset)

    result = await db.execute(query)

    if first:
        return result.scalars().first()
    else:
        return list(result.scalars().all())


async def get_media_handles(db: AsyncSession, channel_id: str) -> list[tuple[str, str, str]]:
    """
    Returns (id, video_public_id, thumbnail_public_id) for every video of a
    channel without loading the rows themselves.
    """
    result = await db.execute(
        select(Video.id, Video.video_public_id, Video.thumbnail_public_id).where(
            Video.channel_id == channel_id
        )
    )
    return [tuple(row) for row in result.all()]


async def create_video(
    db_session: AsyncSession, video_to_create: Video, commit: bool = True
) -> Video:
    """
    Adds a new Video instance to the database.
    """
    db_session.add(video_to_create)
    if commit:
        await db_session.commit()
    else:
        await db_session.flush()
    return video_to_create


async def delete_videos(db_session: AsyncSession, video_ids: list[str]) -> int:
    """
    Bulk-deletes videos and their reaction rows. Comments are handled by the
    caller so the cascade order stays explicit.

    Returns:
        Number of video rows deleted
    """
    if not video_ids:
        return 0
    await db_session.execute(
        delete(video_reactions).where(video_reactions.c.video_id.in_(video_ids))
    )
    result = await db_session.execute(delete(Video).where(Video.id.in_(video_ids)))
    return result.rowcount


async def increment_views(db_session: AsyncSession, video_id: str) -> int:
    """
    Atomically adds one view. Evaluated by the database, so concurrent calls
    never lose an increment.

    Returns:
        Number of rows updated (0 if the video does not exist)
    """
    result = await db_session.execute(
        update(Video)
        .where(Video.id == video_id)
        .values(views=Video.views + 1)
        .execution_options(synchronize_session=False)
    )
    await db_session.commit()
    return result.rowcount


# --- Reactions ---


async def get_reaction(
    db_session: AsyncSession, video_id: str, user_id: uuid.UUID
) -> str | None:
    """Returns 'like', 'dislike' or None for the user's reaction to a video."""
    result = await db_session.execute(
        select(video_reactions.c.kind).where(
            video_reactions.c.video_id == video_id,
            video_reactions.c.user_id == user_id,
        )
    )
    return result.scalar()


async def set_reaction(
    db_session: AsyncSession, video_id: str, user_id: uuid.UUID, kind: str
) -> None:
    """Replaces any existing reaction of the user with `kind`."""
    await clear_reaction(db_session, video_id, user_id)
    await db_session.execute(
        insert(video_reactions).values(video_id=video_id, user_id=user_id, kind=kind)
    )


async def clear_reaction(
    db_session: AsyncSession, video_id: str, user_id: uuid.UUID
) -> int:
    result = await db_session.execute(
        delete(video_reactions).where(
            video_reactions.c.video_id == video_id,
            video_reactions.c.user_id == user_id,
        )
    )
    return result.rowcount
