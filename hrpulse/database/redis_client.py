"""Shared Redis connection for the cache layer.

Only ``connect`` raises. Once the service is up, a failing Redis command is
logged and answered like a miss (``None``, ``False`` or ``0``), so a Redis
outage never fails a request.
"""

import asyncio
from typing import Any, Dict, Optional, Union

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    RedisError,
    TimeoutError as RedisTimeoutError,
)

from hrpulse.core.config import get_settings
from hrpulse.utils.exceptions import CacheError
from hrpulse.utils.logger import get_cache_logger

settings = get_settings()
logger = get_cache_logger()


def pool_options(**overrides: Any) -> Dict[str, Any]:
    """Connection pool keyword arguments built from settings."""
    options: Dict[str, Any] = {
        "max_connections": settings.REDIS_MAX_CONNECTIONS,
        "health_check_interval": settings.REDIS_HEALTH_CHECK_INTERVAL,
        "socket_connect_timeout": 5,
        "socket_keepalive": True,
        "retry_on_timeout": True,
        "retry_on_error": [RedisConnectionError, RedisTimeoutError],
        "decode_responses": True,
        "encoding": "utf-8",
    }
    if settings.REDIS_PASSWORD:
        options["password"] = settings.REDIS_PASSWORD
    options.update(overrides)
    return options


class RedisClient:
    """Process-wide Redis client, used through its classmethods."""

    _pool: Optional[ConnectionPool] = None
    _client: Optional[redis.Redis] = None
    _lock: asyncio.Lock = asyncio.Lock()

    @classmethod
    async def connect(cls, url: Optional[str] = None, **overrides: Any) -> None:
        """Open the pool and verify it with a PING.

        Raises:
            CacheError: If Redis cannot be reached
        """
        async with cls._lock:
            if cls._client is not None:
                logger.warning("Redis already connected")
                return

            options = pool_options(**overrides)
            pool = ConnectionPool.from_url(url or settings.get_redis_url(), **options)
            client = redis.Redis(connection_pool=pool)
            try:
                await client.ping()
            except RedisError as e:
                await pool.disconnect()
                raise CacheError(f"Redis connection failed: {e}", operation="connect", cause=e) from e

            cls._pool, cls._client = pool, client
            logger.info("Redis connected", extra={"max_connections": options["max_connections"]})

    @classmethod
    async def disconnect(cls) -> None:
        async with cls._lock:
            client, pool = cls._client, cls._pool
            cls._client, cls._pool = None, None
            if client is None:
                return
            try:
                await client.aclose()
                if pool is not None:
                    await pool.disconnect()
            except RedisError as e:
                logger.error(f"Error closing Redis connection: {e}")
            else:
                logger.info("Redis disconnected")

    @classmethod
    def is_connected(cls) -> bool:
        return cls._client is not None

    @classmethod
    async def ping(cls) -> bool:
        if cls._client is None:
            return False
        try:
            return bool(await cls._client.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    @classmethod
    async def get(cls, key: str) -> Optional[str]:
        if cls._client is None:
            return None
        try:
            return await cls._client.get(key)
        except RedisError as e:
            logger.error(f"Redis GET {key} failed: {e}")
            return None

    @classmethod
    async def set(cls, key: str, value: Union[str, int, float], ttl: Optional[int] = None) -> bool:
        """Store ``value``; a ``ttl`` of 0 or ``None`` means no expiry."""
        if cls._client is None:
            return False
        try:
            return bool(await cls._client.set(key, value, ex=ttl or None))
        except RedisError as e:
            logger.error(f"Redis SET {key} failed: {e}")
            return False

    @classmethod
    async def delete(cls, *keys: str) -> int:
        if cls._client is None or not keys:
            return 0
        try:
            return await cls._client.delete(*keys)
        except RedisError as e:
            logger.error(f"Redis DEL {', '.join(keys)} failed: {e}")
            return 0


__all__ = ["RedisClient", "pool_options"]
