"""JSON cache over Redis.

The cache is an optimisation only: when it is disabled, unreachable or holds
a corrupt entry, reads fall through to ``default`` and writes report
``False``.
"""

import json
from typing import Any, Optional

from redis.exceptions import RedisError

from hrpulse.core.config import get_settings
from hrpulse.database.redis_client import RedisClient
from hrpulse.utils.logger import get_cache_logger

logger = get_cache_logger()
settings = get_settings()


class CacheManager:
    """Cache JSON-serialisable values under ``CacheKeys`` keys.

    Args:
        redis_client: Object with async ``get``/``set``/``delete``; ``RedisClient`` by default
        enabled: Overrides the ``ENABLE_CACHE`` setting
    """

    def __init__(self, redis_client: Optional[Any] = None, enabled: Optional[bool] = None):
        self.redis = redis_client or RedisClient
        self.enabled = settings.ENABLE_CACHE if enabled is None else enabled

    async def get(self, key: str, default: Any = None) -> Any:
        if not self.enabled:
            return default

        try:
            raw = await self.redis.get(key)
        except RedisError as e:
            logger.warning(f"Cache read of {key} failed, treating as miss: {e}")
            return default
        if raw is None:
            return default

        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Dropping corrupt cache entry {key}: {e}")
            await self.delete(key)
            return default

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store ``value`` as JSON; datetimes and other non-JSON values are stringified."""
        if not self.enabled:
            return False

        try:
            return await self.redis.set(key, json.dumps(value, default=str), ttl=ttl)
        except (RedisError, TypeError, ValueError) as e:
            logger.warning(f"Cache write of {key} failed: {e}")
            return False

    async def delete(self, *keys: str) -> int:
        """Invalidate ``keys``; returns how many existed."""
        if not self.enabled or not keys:
            return 0

        try:
            return await self.redis.delete(*keys)
        except RedisError as e:
            logger.warning(f"Cache invalidation of {', '.join(keys)} failed: {e}")
            return 0


__all__ = ["CacheManager"]
