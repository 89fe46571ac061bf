"""Redis cache layer for URL records."""

import json
import logging
from typing import Optional

import redis.asyncio as redis

from .models import UrlRecord


class RedisCache:
    """Redis cache for records keyed by short code, filled at create time."""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: Default TTL for cached items
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None

        if redis_url:
            self.logger.info(f"Redis cache enabled with TTL={ttl_seconds}s")

    async def connect(self) -> None:
        """Connect to Redis."""
        if not self.enabled:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except (redis.RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self.enabled = False

    async def get_record(self, short_code: str) -> Optional[UrlRecord]:
        """Get a cached record.

        Args:
            short_code: The short code

        Returns:
            Cached record or None
        """
        if not self.enabled or not self.client:
            return None

        try:
            payload = await self.client.get(self.get_cache_key(short_code))
        except (redis.RedisError, OSError) as e:
            self.logger.error(f"Cache get error: {e}")
            return None

        if payload is None:
            return None

        try:
            return UrlRecord.from_dict(json.loads(payload))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            self.logger.warning(f"Discarding malformed cache entry for {short_code}: {e}")
            return None

    async def set_record(self, record: UrlRecord, ttl: Optional[int] = None) -> bool:
        """Cache a record under its short code.

        Args:
            record: Record to cache
            ttl: Optional TTL override (seconds)

        Returns:
            True if successful
        """
        if not self.enabled or not self.client:
            return False

        try:
            ttl = ttl or self.ttl_seconds
            await self.client.setex(
                self.get_cache_key(record.short_code), ttl, json.dumps(record.to_dict())
            )
            return True
        except (redis.RedisError, OSError) as e:
            self.logger.error(f"Cache set error: {e}")
            return False

    async def delete(self, short_code: str) -> bool:
        """Evict a short code from cache.

        Args:
            short_code: The short code

        Returns:
            True if deleted
        """
        if not self.enabled or not self.client:
            return False

        try:
            result = await self.client.delete(self.get_cache_key(short_code))
            return result > 0
        except (redis.RedisError, OSError) as e:
            self.logger.error(f"Cache delete error: {e}")
            return False

    async def ping(self) -> bool:
        """Check that Redis answers."""
        if not self.enabled or not self.client:
            return False

        try:
            return bool(await self.client.ping())
        except (redis.RedisError, OSError) as e:
            self.logger.error(f"Cache ping error: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.logger.info("Redis connection closed")

    def get_cache_key(self, short_code: str) -> str:
        """Generate cache key for short code."""
        return f"shortlinks:url:{short_code}"
