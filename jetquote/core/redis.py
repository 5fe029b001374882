"""Optional Redis connection backing the quote response cache"""
import logging
from typing import Optional
from redis.asyncio import Redis
from jetquote.core.config import settings

logger = logging.getLogger(__name__)

redis: Optional[Redis] = None


async def init_redis() -> Optional[Redis]:
    """Connect and ping. On failure the service keeps running without a cache."""
    global redis
    client = Redis.from_url(
        settings.REDIS_URL,
        decode_responses=False,
        socket_connect_timeout=settings.STORE_TIMEOUT,
    )
    try:
        await client.ping()
    except Exception as e:
        logger.error(f"Redis unavailable at {settings.REDIS_URL}, quote caching disabled: {e}")
        await client.aclose()
        redis = None
        return None

    logger.info("Connected to Redis, quote caching enabled")
    redis = client
    return redis


async def close_redis():
    global redis
    if redis is not None:
        await redis.aclose()
        redis = None


def get_redis() -> Optional[Redis]:
    return redis
