"""
Redis caching layer for the Lessons Service.
"""

import json
from typing import Any, Optional, Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError
from shared.logging import get_logger
from shared.errors import ProxyException


CACHE_KEY_PREFIX = "github:"
DEFAULT_TTL_SECONDS = 3600


class ContentCache(Protocol):
    """Opaque get / set-with-TTL store used by the resolver."""

    async def get(self, key: str) -> Optional[Any]:
        ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        ...


def cache_key(canonical_path: str) -> str:
    """Cache key for a canonical lesson path."""
    return f"{CACHE_KEY_PREFIX}{canonical_path}"


class RedisCache:
    """Redis-backed store for origin payloads."""

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None):
        self.redis_url = redis_url
        self.logger = get_logger("lessons.cache.redis")
        self.redis: Optional[redis.Redis] = client

    async def start(self):
        """Start the Redis cache."""
        if self.redis is None:
            self.redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                health_check_interval=30
            )

        try:
            await self.redis.ping()
        except RedisError as e:
            # The proxy still serves from the origin while Redis is down
            self.logger.warning("Redis unavailable at startup", error=str(e))
            return

        self.logger.info("Redis cache started")

    async def stop(self):
        """Stop the Redis cache."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis cache stopped")

    def _client(self) -> redis.Redis:
        if self.redis is None:
            raise ProxyException("CACHE_NOT_STARTED", "Redis cache has not been started")
        return self.redis

    async def get(self, key: str) -> Optional[Any]:
        """Return the decoded value stored under ``key``, or None."""
        cached_data = await self._client().get(key)
        if cached_data is None:
            return None
        return json.loads(cached_data)

    async def set(self, key: str, value: Any, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        """Store ``value`` as JSON with an expiry of ``ttl_seconds``."""
        await self._client().setex(key, ttl_seconds, json.dumps(value))
        self.logger.debug("Cached content", cache_key=key, ttl=ttl_seconds)

    async def health_check(self) -> bool:
        """Check Redis health."""
        if self.redis is None:
            return False
        try:
            await self.redis.ping()
            return True
        except RedisError:
            return False
