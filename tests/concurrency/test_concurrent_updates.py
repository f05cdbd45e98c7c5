"""
Concurrent requests against a shared file database, one session each.
"""

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.db.base import Base
from app.services import channel_service, video_service
from tests.fixtures.entities import create_channel, create_user, create_video


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'concurrency.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.mark.asyncio
class TestConcurrentUpdates:
    async def test_no_view_is_lost(self, session_factory):
        async with session_factory() as db:
            owner = await create_user(db, "owner")
            channel = await create_channel(db, owner)
            video = await create_video(db, channel)

        async def view():
            async with session_factory() as db:
                await video_service.increase_views(video.id, db)

        await asyncio.gather(view(), view(), view())

        async with session_factory() as db:
            assert (await video_service.get_video_by_id(video.id, db)).views == 3

    async def test_concurrent_subscribers_are_all_counted(self, session_factory):
        async with session_factory() as db:
            owner = await create_user(db, "owner")
            channel = await create_channel(db, owner)
            fans = [await create_user(db, f"fan{i}") for i in range(5)]

        async def subscribe(user_id):
            async with session_factory() as db:
                await channel_service.toggle_subscription(channel.id, user_id, db)

        await asyncio.gather(*(subscribe(fan.id) for fan in fans))

        async with session_factory() as db:
            refreshed = await channel_service.get_channel_by_id(channel.id, db)
            assert refreshed.subscribers == 5
            assert len(refreshed.subscribers_list) == 5
