from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ..models.media_orphan import MediaOrphan


async def create_orphan(
    db_session: AsyncSession, public_id: str, kind: str, reason: str | None = None
) -> MediaOrphan:
    """
    Records a remote object for a later purge. Does not commit.
    """
    orphan = MediaOrphan(public_id=public_id, kind=kind, reason=reason, attempts=0)
    db_session.add(orphan)
    return orphan


async def get_orphans(
    db_session: AsyncSession, *, max_attempts: int | None = None, limit: int = 100
) -> list[MediaOrphan]:
    query = select(MediaOrphan).order_by(MediaOrphan.created_at.asc()).limit(limit)
    if max_attempts is not None:
        query = query.where(MediaOrphan.attempts < max_attempts)
    result = await db_session.execute(query)
    return list(result.scalars().all())


async def mark_attempt(
    db_session: AsyncSession, orphan: MediaOrphan, reason: str
) -> MediaOrphan:
    orphan.attempts += 1
    orphan.reason = reason
    orphan.last_attempt_at = datetime.now(timezone.utc)
    return orphan


async def delete_orphan(db_session: AsyncSession, orphan: MediaOrphan) -> None:
    await db_session.delete(orphan)
