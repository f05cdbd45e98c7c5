"""
Tests for video CRUD: filtering, search, bulk deletes, views and reactions.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy import select

from app.db.crud.crud_video import (
    clear_reaction,
    delete_videos,
    get_media_handles,
    get_reaction,
    get_videos,
    increment_views,
    set_reaction,
)
from app.db.models.association_tables import (
    REACTION_DISLIKE,
    REACTION_LIKE,
    video_reactions,
)
from tests.fixtures.entities import create_comment, create_video


@pytest_asyncio.fixture
async def sample_videos(db_session, alice_channel):
    """
    Three videos on one channel, created a day apart.
    """
    now = datetime.now(timezone.utc)
    return [
        await create_video(
            db_session,
            alice_channel,
            title="Learning Python",
            category="education",
            created_at=now - timedelta(days=2),
        ),
        await create_video(
            db_session,
            alice_channel,
            title="Jazz evening",
            description="Live at 100% volume",
            category="music",
            created_at=now - timedelta(days=1),
        ),
        await create_video(
            db_session,
            alice_channel,
            title="Cooking pasta",
            description="A python-free recipe",
            category="food",
            created_at=now,
        ),
    ]


@pytest.mark.asyncio
class TestGetVideos:
    async def test_newest_first_by_default(self, db_session, sample_videos):
        result = await get_videos(db_session)
        assert [v.title for v in result] == [
            "Cooking pasta",
            "Jazz evening",
            "Learning Python",
        ]

    async def test_filter_by_category(self, db_session, sample_videos):
        result = await get_videos(db_session, category="music")
        assert [v.title for v in result] == ["Jazz evening"]

    async def test_limit_and_offset(self, db_session, sample_videos):
        result = await get_videos(db_session, limit=1, offset=1)
        assert [v.title for v in result] == ["Jazz evening"]

    async def test_search_is_case_insensitive_on_title_and_description(
        self, db_session, sample_videos
    ):
        result = await get_videos(db_session, q="PYTHON")
        assert {v.title for v in result} == {"Learning Python", "Cooking pasta"}

    async def test_search_treats_wildcards_literally(self, db_session, sample_videos):
        result = await get_videos(db_session, q="100%")
        assert [v.title for v in result] == ["Jazz evening"]

        assert await get_videos(db_session, q="%") == [sample_videos[1]]

    async def test_blank_search_is_ignored(self, db_session, sample_videos):
        assert len(await get_videos(db_session, q="   ")) == 3

    async def test_references_are_populated(self, db_session, sample_videos, alice):
        video = await get_videos(db_session, id=sample_videos[0].id, first=True)

        assert video.uploader.username == "alice"
        assert video.channel.channel_name == "Alice's Channel"
        assert video.likes == []
        assert video.dislikes == []

    async def test_detail_populates_comment_authors(
        self, db_session, alice_video, bob
    ):
        await create_comment(db_session, alice_video, bob, "First!")

        video = await get_videos(db_session, id=alice_video.id, first=True, detail=True)

        assert [c.author.username for c in video.comments] == ["bob"]

    async def test_unknown_filter_field_raises(self, db_session):
        with pytest.raises(ValueError, match="Invalid filter field"):
            await get_videos(db_session, not_a_column="x")


@pytest.mark.asyncio
class TestDeleteVideos:
    async def test_bulk_delete_removes_reactions(self, db_session, sample_videos, bob):
        await set_reaction(db_session, sample_videos[0].id, bob.id, REACTION_LIKE)
        await db_session.commit()

        deleted = await delete_videos(db_session, [v.id for v in sample_videos[:2]])
        await db_session.commit()

        assert deleted == 2
        assert [v.title for v in await get_videos(db_session)] == ["Cooking pasta"]
        rows = await db_session.execute(select(video_reactions))
        assert rows.all() == []

    async def test_empty_list_is_a_noop(self, db_session):
        assert await delete_videos(db_session, []) == 0

    async def test_media_handles(self, db_session, alice_channel, alice_video):
        handles = await get_media_handles(db_session, alice_channel.id)
        assert handles == [
            (
                alice_video.id,
                alice_video.video_public_id,
                alice_video.thumbnail_public_id,
            )
        ]


@pytest.mark.asyncio
class TestIncrementViews:
    async def test_increments_by_one(self, db_session, alice_video):
        assert await increment_views(db_session, alice_video.id) == 1
        assert await increment_views(db_session, alice_video.id) == 1

        video = await get_videos(db_session, id=alice_video.id, first=True)
        assert video.views == 2

    async def test_missing_video_updates_nothing(self, db_session):
        assert await increment_views(db_session, "missing") == 0


@pytest.mark.asyncio
class TestReactions:
    async def test_set_replaces_previous_kind(self, db_session, alice_video, bob):
        await set_reaction(db_session, alice_video.id, bob.id, REACTION_LIKE)
        await set_reaction(db_session, alice_video.id, bob.id, REACTION_DISLIKE)
        await db_session.commit()

        assert await get_reaction(db_session, alice_video.id, bob.id) == REACTION_DISLIKE
        video = await get_videos(db_session, id=alice_video.id, first=True)
        assert video.likes == []
        assert [u.id for u in video.dislikes] == [bob.id]

    async def test_clear(self, db_session, alice_video, bob):
        await set_reaction(db_session, alice_video.id, bob.id, REACTION_LIKE)
        assert await clear_reaction(db_session, alice_video.id, bob.id) == 1
        assert await get_reaction(db_session, alice_video.id, bob.id) is None
