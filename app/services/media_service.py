"""
Upload validation and best-effort release of media store objects.

A failed deletion never aborts the operation that asked for it. The failure is
logged and the object is recorded in media_orphans, where the maintenance
worker retries it later.
"""

import logging
from typing import Iterable

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..clients.media_store import MediaKind, MediaStore, UploadedMedia
from ..core.errors import MediaDeleteError, ValidationError
from ..db.crud import crud_media_orphan

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/jpg"})
ALLOWED_VIDEO_TYPES = frozenset({"video/mp4", "video/quicktime", "video/x-msvideo"})


def allowed_types_for(kind: MediaKind) -> frozenset[str]:
    return ALLOWED_VIDEO_TYPES if kind == MediaKind.VIDEO else ALLOWED_IMAGE_TYPES


async def read_upload(upload: UploadFile | None, kind: MediaKind) -> bytes | None:
    """
    Reads a multipart file into memory after checking its content type.

    Returns None when no file (or an empty file field) was sent.
    """
    if upload is None or not upload.filename:
        return None
    if upload.content_type not in allowed_types_for(kind):
        raise ValidationError(
            f"Invalid file type for {kind.value}: {upload.content_type}"
        )
    data = await upload.read()
    if not data:
        raise ValidationError(f"Empty {kind.value} file")
    return data


async def release_media(
    media_store: MediaStore,
    db_session: AsyncSession,
    handles: Iterable[tuple[str | None, MediaKind]],
    reason: str,
) -> list[str]:
    """
    Deletes each (public_id, kind) independently. Handles that fail are added
    to the session as MediaOrphans; the caller commits them.

    Returns:
        public_ids that could not be deleted
    """
    failed = []
    for public_id, kind in handles:
        if not public_id:
            continue
        try:
            await media_store.delete(public_id, kind)
        except MediaDeleteError as e:
            logger.error("Could not delete %s '%s': %s", kind.value, public_id, e.reason)
            await crud_media_orphan.create_orphan(
                db_session, public_id, kind.value, reason=f"{reason}: {e.reason}"
            )
            logger.warning("Recorded '%s' as orphaned media", public_id)
            failed.append(public_id)
    return failed


async def discard_uploads(
    media_store: MediaStore,
    db_session: AsyncSession,
    uploads: Iterable[tuple[UploadedMedia, MediaKind]],
    reason: str,
) -> None:
    """
    Releases fresh uploads that no row will reference because the write that
    needed them failed. The session must already be rolled back.
    """
    failed = await release_media(
        media_store,
        db_session,
        [(uploaded.public_id, kind) for uploaded, kind in uploads],
        reason,
    )
    if not failed:
        return
    try:
        await db_session.commit()
    except SQLAlchemyError:
        logger.exception("Could not record orphaned media %s", failed)
        await db_session.rollback()
