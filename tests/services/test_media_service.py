"""
Tests for upload validation and best-effort media release.
"""

import io

import pytest
from fastapi import UploadFile
from sqlalchemy import select
from starlette.datastructures import Headers

from app.clients.media_store import MediaKind, UploadedMedia
from app.core.errors import ValidationError
from app.db.models import MediaOrphan
from app.services import media_service


def _upload(content: bytes, content_type: str, filename: str = "file.bin") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.asyncio
class TestReadUpload:
    async def test_no_file(self):
        assert await media_service.read_upload(None, MediaKind.BANNER) is None

    async def test_image_accepted(self):
        data = await media_service.read_upload(
            _upload(b"png-bytes", "image/png"), MediaKind.BANNER
        )
        assert data == b"png-bytes"

    @pytest.mark.parametrize("content_type", ["video/mp4", "video/quicktime", "video/x-msvideo"])
    async def test_video_types_accepted(self, content_type):
        data = await media_service.read_upload(_upload(b"v", content_type), MediaKind.VIDEO)
        assert data == b"v"

    async def test_video_rejected_for_image_field(self):
        with pytest.raises(ValidationError):
            await media_service.read_upload(
                _upload(b"v", "video/mp4"), MediaKind.THUMBNAIL
            )

    async def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError, match="Invalid file type"):
            await media_service.read_upload(
                _upload(b"gif", "image/gif"), MediaKind.PROFILE
            )

    async def test_empty_file_rejected(self):
        with pytest.raises(ValidationError):
            await media_service.read_upload(_upload(b"", "image/png"), MediaKind.PROFILE)


@pytest.mark.asyncio
class TestReleaseMedia:
    async def test_each_handle_is_attempted_independently(
        self, db_session, fake_media_store
    ):
        fake_media_store.fail_delete_ids.add("b")

        failed = await media_service.release_media(
            fake_media_store,
            db_session,
            [("a", MediaKind.VIDEO), ("b", MediaKind.THUMBNAIL), (None, MediaKind.BANNER), ("c", MediaKind.BANNER)],
            "test cleanup",
        )
        await db_session.commit()

        assert failed == ["b"]
        assert fake_media_store.deleted == ["a", "c"]
        orphans = (await db_session.execute(select(MediaOrphan))).scalars().all()
        assert [(o.public_id, o.kind) for o in orphans] == [("b", "thumbnail")]
        assert orphans[0].reason.startswith("test cleanup")

    async def test_discard_uploads_commits_orphans(self, db_session, fake_media_store):
        fake_media_store.fail_delete_ids.add("x")

        await media_service.discard_uploads(
            fake_media_store,
            db_session,
            [(UploadedMedia(url="https://media.test/x", public_id="x"), MediaKind.VIDEO)],
            "write failed",
        )
        await db_session.rollback()

        orphans = (await db_session.execute(select(MediaOrphan))).scalars().all()
        assert [o.public_id for o in orphans] == ["x"]
