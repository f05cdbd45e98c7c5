from zoneinfo import ZoneInfo
from arq import cron

from .clients.media_store import media_store_manager
from .core.config import settings
from .db.session import sessionmanager
from .services import maintenance_service

REDIS_SETTINGS = settings.get_redis_settings()


async def startup(ctx):
    # One media store client for every job of this worker
    with media_store_manager.get_client() as media_store:
        ctx["media_store"] = media_store


async def shutdown(ctx):
    await sessionmanager.close()


async def reconcile_subscriber_counts_task(ctx):
    """
    Hourly cron. Recomputes subscriber counts that drifted from their rows.
    """
    async with sessionmanager.session() as db:
        return await maintenance_service.reconcile_subscriber_counts(db)


async def purge_orphaned_media_task(ctx):
    """
    Hourly cron. Retries deleting media objects no row references any more.
    """
    async with sessionmanager.session() as db:
        return await maintenance_service.purge_orphaned_media(
            db, ctx["media_store"], max_attempts=settings.ORPHAN_PURGE_MAX_ATTEMPTS
        )


# This class defines the worker's configuration.
# The `arq` CLI will look for a class named `WorkerSettings`.
class WorkerSettings:
    """
    Defines the configuration for the arq worker.
    The `functions` list tells the worker which tasks it can execute.
    """

    functions = [
        reconcile_subscriber_counts_task,
        purge_orphaned_media_task,
    ]

    cron_jobs = [
        cron(reconcile_subscriber_counts_task, minute=0),
        cron(purge_orphaned_media_task, minute=30),
    ]

    on_startup = startup
    on_shutdown = shutdown
    redis_settings = REDIS_SETTINGS
    timezone = ZoneInfo("UTC")
    max_jobs = 10
    keep_result = 0
