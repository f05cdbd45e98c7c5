"""
Tests for the arq Redis dependency.
"""

import pytest
from unittest.mock import AsyncMock, patch

from app.queue import get_arq_redis


@pytest.mark.asyncio
class TestGetArqRedis:
    async def test_pool_is_closed_after_the_request(self):
        pool = AsyncMock()
        with patch("app.queue.arq.create_pool", new=AsyncMock(return_value=pool)):
            gen = get_arq_redis()
            assert await gen.__anext__() is pool
            pool.aclose.assert_not_awaited()

            with pytest.raises(StopAsyncIteration):
                await gen.__anext__()

        pool.aclose.assert_awaited_once()

    async def test_pool_is_closed_when_the_request_fails(self):
        pool = AsyncMock()
        with patch("app.queue.arq.create_pool", new=AsyncMock(return_value=pool)):
            gen = get_arq_redis()
            await gen.__anext__()

            with pytest.raises(ConnectionError):
                await gen.athrow(ConnectionError("lost"))

        pool.aclose.assert_awaited_once()
