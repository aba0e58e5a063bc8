"""Redis caching utilities.

A thin get/set-with-TTL wrapper used by the dashboard aggregates.  Redis is
an optimisation only: every Redis failure is logged and the caller falls
back to the uncached query.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from app.config import settings

logger = logging.getLogger(__name__)

# Global Redis connection pool
_redis_client: Optional[redis.Redis] = None


async def get_redis() -> redis.Redis:
    """Get or create Redis client connection."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=50,
        )
    return _redis_client


async def close_redis():
    """Close Redis connection (call on app shutdown)."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


async def get_cache(key: str) -> Any | None:
    """Return the decoded value stored under ``key``, or None on miss/error."""
    try:
        redis_client = await get_redis()
        cached_value = await redis_client.get(key)
    except redis.RedisError as e:
        logger.warning(f"Redis error (falling back to uncached): {e}")
        return None

    if cached_value is None:
        logger.debug(f"Cache MISS: {key}")
        return None

    logger.debug(f"Cache HIT: {key}")
    return json.loads(cached_value)


async def set_cache(key: str, value: Any, ttl: int | None = None) -> None:
    """Store ``value`` as JSON under ``key`` for ``ttl`` seconds."""
    ttl = ttl or settings.redis_ttl
    try:
        redis_client = await get_redis()
        await redis_client.setex(key, ttl, json.dumps(value, default=str))
    except redis.RedisError as e:
        logger.warning(f"Redis error (value not cached): {e}")


async def invalidate_cache(pattern: str):
    """Invalidate cache keys matching a pattern.

    Example:
        await invalidate_cache("dashboard:*")
    """
    try:
        redis_client = await get_redis()
        keys = []
        async for key in redis_client.scan_iter(match=pattern):
            keys.append(key)

        if keys:
            await redis_client.delete(*keys)
            logger.info(f"Invalidated {len(keys)} cache keys matching {pattern}")
    except redis.RedisError as e:
        logger.warning(f"Failed to invalidate cache: {e}")
