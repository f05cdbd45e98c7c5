import arq
from .core.config import settings


async def get_arq_redis():
    """
    Yields an arq Redis client for one request and closes its pool afterwards.
    """
    redis = await arq.create_pool(settings.get_redis_settings())
    try:
        yield redis
    finally:
        await redis.aclose()
