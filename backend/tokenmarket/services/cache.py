"""
Redis cache for read responses.

Volume rankings and per-collection lookups are cached as JSON for
CACHE_TTL_SECONDS. Every committed batch invalidates the whole namespace,
so readers never see totals older than the last write for long.

The cache is optional: any Redis failure is logged and treated as a miss.
"""

import hashlib
import json
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

import redis.asyncio as redis

from tokenmarket.core.config import settings

logger = logging.getLogger(__name__)

CACHE_PREFIX = "tokenmarket:"


def make_cache_key(namespace: str, **params) -> str:
    """Build a deterministic cache key from a namespace and query parameters."""
    raw = json.dumps(params, sort_keys=True, default=str)
    h = hashlib.md5(raw.encode()).hexdigest()[:12]
    return f"{CACHE_PREFIX}{namespace}:{h}"


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal and datetime."""

    def default(self, obj):
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


class CacheService:
    """Redis cache for volume and listing responses."""

    _redis: Optional[redis.Redis] = None

    @classmethod
    async def get_redis(cls) -> redis.Redis:
        if cls._redis is None:
            cls._redis = redis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
            )
        return cls._redis

    @classmethod
    async def close(cls):
        if cls._redis is not None:
            await cls._redis.close()
            cls._redis = None

    @classmethod
    async def get_cached(cls, namespace: str, **params) -> Optional[dict]:
        """Return the cached response, or None on miss or error."""
        try:
            r = await cls.get_redis()
            key = make_cache_key(namespace, **params)
            data = await r.get(key)
            if data:
                logger.debug("Cache hit: %s", key)
                return json.loads(data)
        except Exception as e:
            logger.warning("Cache get failed: %s", e)
        return None

    @classmethod
    async def set_cached(cls, namespace: str, response_data: dict, **params):
        try:
            r = await cls.get_redis()
            key = make_cache_key(namespace, **params)
            await r.set(
                key,
                json.dumps(response_data, cls=DecimalEncoder),
                ex=settings.CACHE_TTL_SECONDS,
            )
            logger.debug("Cache set: %s", key)
        except Exception as e:
            logger.warning("Cache set failed: %s", e)

    @classmethod
    async def invalidate(cls):
        """Drop every cached response after a batch commit."""
        try:
            r = await cls.get_redis()
            cursor = 0
            deleted = 0
            while True:
                cursor, keys = await r.scan(
                    cursor, match=f"{CACHE_PREFIX}*", count=100
                )
                if keys:
                    await r.delete(*keys)
                    deleted += len(keys)
                if cursor == 0:
                    break
            logger.debug("Cache invalidated (%d keys)", deleted)
        except Exception as e:
            logger.warning("Cache invalidation failed: %s", e)

    @classmethod
    async def health_check(cls) -> bool:
        try:
            r = await cls.get_redis()
            await r.ping()
            return True
        except Exception:
            return False
