"""Async Redis client wrapper."""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError, WatchError

from catalogsearch.core.exceptions import CacheError

logger = logging.getLogger(__name__)


class AsyncRedisClient:
    """Async Redis client wrapper with JSON serialization."""

    def __init__(self, redis_url: str) -> None:
        self._redis_url = redis_url
        self._pool: aioredis.ConnectionPool | None = None
        self._redis: aioredis.Redis | None = None

    async def connect(self) -> None:
        """Connect to Redis."""
        self._pool = aioredis.ConnectionPool.from_url(
            self._redis_url,
            max_connections=20,
            decode_responses=True,
        )
        self._redis = aioredis.Redis(connection_pool=self._pool)

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._redis:
            await self._redis.aclose()
        if self._pool:
            await self._pool.disconnect()
        self._redis = None
        self._pool = None

    async def ping(self) -> bool:
        """Check the connection."""
        if not self._redis:
            return False
        try:
            return await self._redis.ping()
        except RedisError as e:
            raise CacheError(f"Redis ping failed: {e}") from e

    async def get(self, key: str) -> Any | None:
        """Get a value from cache."""
        if not self._redis:
            return None
        try:
            value = await self._redis.get(key)
        except RedisError as e:
            raise CacheError(f"Cache get failed for {key}: {e}") from e
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            return None

    async def delete(self, key: str) -> bool:
        """Delete a key from cache."""
        if not self._redis:
            return False
        try:
            result = await self._redis.delete(key)
        except RedisError as e:
            raise CacheError(f"Cache delete failed for {key}: {e}") from e
        return result > 0

    async def get_generation(self, key: str) -> str | None:
        """Read a generation counter, or None if it was never bumped or has expired."""
        if not self._redis:
            return None
        try:
            return await self._redis.get(key)
        except RedisError as e:
            raise CacheError(f"Cache generation read failed for {key}: {e}") from e

    async def bump_generation(self, key: str, ttl: int = 300) -> None:
        """Increment a generation counter and refresh its TTL."""
        if not self._redis:
            return
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.incr(key)
                pipe.expire(key, ttl)
                await pipe.execute()
        except RedisError as e:
            raise CacheError(f"Cache generation bump failed for {key}: {e}") from e

    async def set_if_generation(
        self,
        key: str,
        value: Any,
        *,
        generation_key: str,
        generation: str | None,
        ttl: int = 300,
    ) -> bool:
        """
        Set a value only while ``generation_key`` still holds ``generation``.

        The generation key is watched for the whole check-and-set, so a bump
        landing in between aborts the write.

        Returns:
            True if the value was written
        """
        if not self._redis:
            return False
        serialized = json.dumps(value, default=str)
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                await pipe.watch(generation_key)
                if await pipe.get(generation_key) != generation:
                    return False
                pipe.multi()
                pipe.set(key, serialized, ex=ttl)
                await pipe.execute()
        except WatchError:
            return False
        except RedisError as e:
            raise CacheError(f"Cache set failed for {key}: {e}") from e
        return True

    async def __aenter__(self) -> "AsyncRedisClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
