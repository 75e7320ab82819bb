"""
Redis caching service for room listings.

CACHING STRATEGY
================

What we cache:
  - Room listing responses per lodging (JSON-serialized)
  - Cache key pattern: "rooms:lodging={lodging_id}"

Why:
  - Room listings are read on every search/detail page and change rarely
    (only when a business edits its rooms)

Invalidation strategy:
  - Any room write (create, update, delete) deletes the key of its lodging
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

What we never cache:
  - Bookings and availability. The overlap count must be read inside the
    booking transaction; a cached count would allow overbooking.

Redis is optional: when it is disabled or unreachable every call degrades to
a cache miss and the database answers.
"""

import json
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError
from hotel_business.core.config import get_settings
from hotel_business.core.logging import get_logger
from hotel_business.core.metrics import record_cache_operation, redis_connection_errors

logger = get_logger(__name__)
settings = get_settings()

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except (RedisError, OSError) as e:
            redis_connection_errors.inc()
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _make_room_list_key(lodging_id: int) -> str:
    return f"rooms:lodging={lodging_id}"


async def get_cached_rooms(lodging_id: int) -> Optional[dict]:
    """Retrieve a cached room listing for a lodging."""
    client = await get_redis()
    if not client:
        return None

    key = _make_room_list_key(lodging_id)
    try:
        data = await client.get(key)
        record_cache_operation("get", hit=bool(data))
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except RedisError as e:
        redis_connection_errors.inc()
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_rooms(lodging_id: int, data: dict) -> None:
    """Cache a room listing with TTL."""
    client = await get_redis()
    if not client:
        return

    key = _make_room_list_key(lodging_id)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except RedisError as e:
        redis_connection_errors.inc()
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_room_cache(lodging_id: int) -> None:
    """Drop the cached room listing of one lodging."""
    client = await get_redis()
    if not client:
        return

    key = _make_room_list_key(lodging_id)
    try:
        deleted = await client.delete(key)
        logger.info("cache_invalidated", key=key, keys_deleted=deleted)
    except RedisError as e:
        redis_connection_errors.inc()
        logger.error("cache_invalidation_error", key=key, error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except RedisError as e:
        return {"status": "error", "error": str(e)}
