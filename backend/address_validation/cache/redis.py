import json
import logging
import time

import redis.asyncio as redis

from address_validation.config import settings

logger = logging.getLogger(__name__)

_pool: redis.Redis | None = None

_COOLDOWN_SECONDS = 30
_circuit_open_until: float = 0.0


def _circuit_is_open() -> bool:
    return time.monotonic() < _circuit_open_until


def _trip_circuit() -> None:
    global _circuit_open_until
    _circuit_open_until = time.monotonic() + _COOLDOWN_SECONDS


def _get_redis() -> redis.Redis:
    global _pool
    if _pool is None:
        _pool = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=0.5,
            socket_connect_timeout=0.5,
        )
    return _pool


async def cache_get(key: str) -> dict | list | None:
    """Get a cached value. Returns None if Redis is unavailable or key doesn't exist."""
    if _circuit_is_open():
        return None
    try:
        r = _get_redis()
        value = await r.get(key)
        if value is None:
            return None
        return json.loads(value)
    except Exception:
        logger.debug("Cache get failed for key=%s", key, exc_info=True)
        _trip_circuit()
        return None


async def cache_set(key: str, value: dict | list, ttl: int | None = None) -> None:
    """Set a cached value. Silently skips if Redis is unavailable."""
    if _circuit_is_open():
        return
    try:
        r = _get_redis()
        serialized = json.dumps(value)
        if ttl:
            await r.setex(key, ttl, serialized)
        else:
            await r.set(key, serialized)
    except Exception:
        logger.debug("Cache set failed for key=%s", key, exc_info=True)
        _trip_circuit()


async def cache_delete(key: str) -> int:
    """Delete one key. Returns the number of keys removed (0 if Redis is unavailable)."""
    if _circuit_is_open():
        return 0
    try:
        r = _get_redis()
        return int(await r.delete(key))
    except Exception:
        logger.debug("Cache delete failed for key=%s", key, exc_info=True)
        _trip_circuit()
        return 0


async def cache_delete_prefix(prefix: str) -> int:
    """Delete every key starting with ``prefix``. Returns the number of keys removed."""
    if _circuit_is_open():
        return 0
    deleted = 0
    try:
        r = _get_redis()
        async for key in r.scan_iter(match=f"{prefix}*", count=500):
            deleted += int(await r.delete(key))
    except Exception:
        logger.debug("Cache delete failed for prefix=%s", prefix, exc_info=True)
        _trip_circuit()
    return deleted
