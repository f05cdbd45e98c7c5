"""
Periodic repair jobs run by the arq worker.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..clients.media_store import MediaKind, MediaStore
from ..core.errors import MediaDeleteError
from ..db.crud import crud_channel, crud_media_orphan

logger = logging.getLogger(__name__)


async def reconcile_subscriber_counts(db_session: AsyncSession) -> int:
    """
    Recomputes Channel.subscribers for every channel whose count disagrees
    with its subscription rows.

    Returns:
        Number of channels fixed
    """
    drifted = await crud_channel.get_drifted_channel_ids(db_session)
    for channel_id in drifted:
        await crud_channel.recount_subscribers(db_session, channel_id)
    await db_session.commit()
    if drifted:
        logger.warning("Fixed subscriber counts of %d channels", len(drifted))
    return len(drifted)


async def purge_orphaned_media(
    db_session: AsyncSession,
    media_store: MediaStore,
    max_attempts: int,
    batch_size: int = 100,
) -> dict[str, int]:
    """
    Retries deleting recorded orphans. A purged orphan's record is removed; a
    failure bumps its attempt count. Records at max_attempts are left alone.
    """
    orphans = await crud_media_orphan.get_orphans(
        db_session, max_attempts=max_attempts, limit=batch_size
    )
    purged = 0
    failed = 0
    for orphan in orphans:
        try:
            kind = MediaKind(orphan.kind)
            await media_store.delete(orphan.public_id, kind)
        except ValueError:
            reason = f"unknown media kind {orphan.kind!r}"
        except MediaDeleteError as e:
            reason = e.reason
        else:
            await crud_media_orphan.delete_orphan(db_session, orphan)
            purged += 1
            continue

        await crud_media_orphan.mark_attempt(db_session, orphan, reason)
        failed += 1
        if orphan.attempts >= max_attempts:
            logger.error(
                "Giving up on orphaned media '%s' after %d attempts",
                orphan.public_id,
                orphan.attempts,
            )
    await db_session.commit()
    logger.info("Orphan purge: %d purged, %d failed", purged, failed)
    return {"purged": purged, "failed": failed}
