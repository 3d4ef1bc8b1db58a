"""Redis store for caching.

Handles:
- Caching with TTL policies
- JSON payload helpers

TTL policies:
- Landing payload cache: 30-300 seconds (settings.landing_cache_ttl)
"""

import json
import logging
from typing import Any

import redis.asyncio as redis

from reviewhub.settings import get_settings

# Key prefixes
PREFIX_LANDING = "landing:"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    _redis = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    # Validate connectivity early (especially for `rediss://` in production).
    await _redis.ping()
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


# ============================================================
# Generic cache operations
# ============================================================


async def cache_get(key: str) -> str | None:
    """Get value from cache.

    Args:
        key: Cache key.

    Returns:
        Cached value or None if not found.
    """
    return await _get_redis().get(key)


async def cache_set(key: str, value: str, ttl: int) -> None:
    """Set value in cache with TTL.

    Args:
        key: Cache key.
        value: Value to cache.
        ttl: Time-to-live in seconds.
    """
    await _get_redis().setex(key, ttl, value)


async def cache_get_json(key: str) -> dict[str, Any] | None:
    """Get JSON value from cache.

    Returns:
        Parsed JSON dict or None if not found.
    """
    value = await cache_get(key)
    if value:
        return json.loads(value)
    return None


async def cache_set_json(key: str, value: dict[str, Any], ttl: int) -> None:
    """Set JSON value in cache."""
    await cache_set(key, json.dumps(value, default=str), ttl)


# ============================================================
# Landing payload cache
# ============================================================


def landing_cache_key(page: int, limit: int) -> str:
    return f"{PREFIX_LANDING}{page}:{limit}"


async def get_landing_cache(page: int, limit: int) -> dict[str, Any] | None:
    """Get cached landing payload for a page of recent reviews."""
    return await cache_get_json(landing_cache_key(page, limit))


async def set_landing_cache(page: int, limit: int, payload: dict[str, Any], ttl: int) -> None:
    """Cache the landing payload for a page of recent reviews."""
    await cache_set_json(landing_cache_key(page, limit), payload, ttl)


async def clear_landing_cache() -> int:
    """Drop every cached landing payload (after moderation changes).

    Returns:
        Number of keys deleted.
    """
    client = _get_redis()
    deleted = 0
    async for key in client.scan_iter(match=f"{PREFIX_LANDING}*"):
        deleted += await client.delete(key)
    return deleted
