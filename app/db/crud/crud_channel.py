import uuid
from typing import Literal
from sqlalchemy import select, delete, func, update, insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from ..models.channel import Channel
from ..models.association_tables import channel_subscriptions
from .crud_base import (
    base_get,
    _validate_pagination,
    _validate_order_by_field,
)

# References populated whenever a channel is returned to a client
CHANNEL_LOAD_OPTIONS = (
    selectinload(Channel.owner),
    selectinload(Channel.subscribers_list),
    selectinload(Channel.videos),
)


async def get_channels(
    db: AsyncSession,
    *,
    id: str | None = None,
    owner_id: uuid.UUID | None = None,
    channel_handle: str | None = None,
    channel_name: str | None = None,
    # Pagination
    limit: int | None = None,
    offset: int = 0,
    # Ordering
    order_by: str = "channel_name",
    order_direction: Literal["asc", "desc"] = "asc",
    # Return type control
    first: bool = False,
) -> list[Channel] | Channel | None:
    """
    Retrieve channels with owner, subscribers and videos populated.

    Args:
        id: Filter by channel ID
        owner_id: Filter by owning user
        channel_handle: Filter by public channel handle
        channel_name: Filter by exact display name
        limit: Maximum number of results (None = unlimited)
        offset: Number of results to skip (for pagination)
        order_by: Field to order by
        order_direction: Sort direction ('asc' or 'desc')
        first: If True, return single Channel or None instead of list
    """
    _validate_pagination(limit, offset)

    if order_direction not in ("asc", "desc"):
        raise ValueError("order_direction must be 'asc' or 'desc'")

    _validate_order_by_field(Channel, order_by)

    filters = {}
    if id is not None:
        filters["id"] = id
    if owner_id is not None:
        filters["owner_id"] = owner_id
    if channel_handle is not None:
        filters["channel_handle"] = channel_handle
    if channel_name is not None:
        filters["channel_name"] = channel_name

    return await base_get(
        db,
        Channel,
        filters=filters,
        limit=limit,
        offset=offset,
        order_by=order_by,
        order_direction=order_direction,
        first=first,
        options=CHANNEL_LOAD_OPTIONS,
    )


async def create_channel(
    db_session: AsyncSession, channel_to_create: Channel, commit: bool = True
) -> Channel:
    """
    Adds a new Channel instance to the database.
    """
    db_session.add(channel_to_create)
    if commit:
        await db_session.commit()
    else:
        await db_session.flush()
    return channel_to_create


async def delete_channel(
    db_session: AsyncSession, channel_to_delete: Channel, commit: bool = True
) -> None:
    """
    Deletes a channel row and its subscription rows.
    Videos and comments must already be gone; see channel_service.
    """
    await db_session.execute(
        delete(channel_subscriptions).where(
            channel_subscriptions.c.channel_id == channel_to_delete.id
        )
    )
    await db_session.execute(delete(Channel).where(Channel.id == channel_to_delete.id))
    if commit:
        await db_session.commit()


# --- Subscriptions ---


def _channel_lock_query(channel_id: str):
    return select(Channel.id).where(Channel.id == channel_id).with_for_update()


async def lock_channel(db_session: AsyncSession, channel_id: str) -> bool:
    """
    Takes the channel row lock for the rest of the transaction. Concurrent
    togglers on one channel queue here, so each one counts the rows the
    previous one committed.

    Returns:
        False if the channel does not exist
    """
    result = await db_session.execute(_channel_lock_query(channel_id))
    return result.first() is not None


async def is_subscribed(
    db_session: AsyncSession, channel_id: str, user_id: uuid.UUID
) -> bool:
    result = await db_session.execute(
        select(channel_subscriptions.c.channel_id).where(
            channel_subscriptions.c.channel_id == channel_id,
            channel_subscriptions.c.user_id == user_id,
        )
    )
    return result.first() is not None


async def add_subscription(
    db_session: AsyncSession, channel_id: str, user_id: uuid.UUID
) -> None:
    await db_session.execute(
        insert(channel_subscriptions).values(channel_id=channel_id, user_id=user_id)
    )


async def remove_subscription(
    db_session: AsyncSession, channel_id: str, user_id: uuid.UUID
) -> int:
    result = await db_session.execute(
        delete(channel_subscriptions).where(
            channel_subscriptions.c.channel_id == channel_id,
            channel_subscriptions.c.user_id == user_id,
        )
    )
    return result.rowcount


def _subscriber_count_subquery():
    return (
        select(func.count())
        .select_from(channel_subscriptions)
        .where(channel_subscriptions.c.channel_id == Channel.id)
        .scalar_subquery()
    )


async def recount_subscribers(db_session: AsyncSession, channel_id: str) -> None:
    """
    Recomputes Channel.subscribers from the subscription rows. Callers that
    change subscriptions hold the lock from lock_channel first.
    """
    await db_session.execute(
        update(Channel)
        .where(Channel.id == channel_id)
        .values(subscribers=_subscriber_count_subquery())
        .execution_options(synchronize_session=False)
    )


async def get_drifted_channel_ids(db_session: AsyncSession) -> list[str]:
    """Channels whose stored subscriber count disagrees with their rows."""
    result = await db_session.execute(
        select(Channel.id).where(Channel.subscribers != _subscriber_count_subquery())
    )
    return list(result.scalars().all())
