"""
Cache strategies using Strategy Pattern.
Allows switching between different cache backends (Redis, In-Memory, Null).

The cache is an accelerator only: a backend failure is logged and reported
as a miss, never raised to the resolver.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Tuple
import logging
import time

from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    All methods are async because cache operations involve I/O (network for Redis).
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        Returns:
            Cached value or None if not found (or the backend failed)
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        """
        Set value in cache with TTL (Time To Live).

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key. True if deleted, False if missing or failed."""
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    async def increment(self, key: str) -> Optional[int]:
        """
        Atomically increment an integer counter, creating it at 1.

        Returns:
            New counter value, or None if the backend failed
        """
        pass

    @abstractmethod
    async def ttl(self, key: str) -> int:
        """
        Remaining time to live in seconds.

        Follows Redis conventions: -1 for a key without expiry,
        -2 for a missing key.
        """
        pass

    @abstractmethod
    async def clear(self) -> bool:
        pass


class RedisCache(CacheStrategy):
    """
    Redis cache implementation.

    Distributed (all API instances share it), TTL support, atomic INCR.
    """

    def __init__(self, redis_client):
        """
        Args:
            redis_client: Redis client instance (redis.Redis)
        """
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(key)
            return value.decode("utf-8") if value else None
        except RedisError as e:
            logger.warning(f"Redis get error for {key}: {e}")
            return None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        try:
            return bool(self.redis.setex(key, ttl, value))
        except RedisError as e:
            logger.warning(f"Redis set error for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        try:
            return bool(self.redis.delete(key))
        except RedisError as e:
            logger.warning(f"Redis delete error for {key}: {e}")
            return False

    async def exists(self, key: str) -> bool:
        try:
            return bool(self.redis.exists(key))
        except RedisError as e:
            logger.warning(f"Redis exists error for {key}: {e}")
            return False

    async def increment(self, key: str) -> Optional[int]:
        try:
            return int(self.redis.incr(key))
        except RedisError as e:
            logger.warning(f"Redis incr error for {key}: {e}")
            return None

    async def ttl(self, key: str) -> int:
        try:
            return int(self.redis.ttl(key))
        except RedisError as e:
            logger.warning(f"Redis ttl error for {key}: {e}")
            return -2

    async def clear(self) -> bool:
        """Clear all Redis keys (use with caution!)"""
        try:
            self.redis.flushdb()
            return True
        except RedisError as e:
            logger.warning(f"Redis clear error: {e}")
            return False


class InMemoryCache(CacheStrategy):
    """
    In-memory cache implementation using Python dict.

    Not distributed and lost on restart; good for development and tests.
    Expired entries are dropped lazily on access.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        # key -> (value, expires_at or None)
        self._cache: Dict[str, Tuple[str, Optional[float]]] = {}

    def _live_entry(self, key: str) -> Optional[Tuple[str, Optional[float]]]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        expires_at = entry[1]
        if expires_at is not None and expires_at <= self._clock():
            del self._cache[key]
            return None
        return entry

    async def get(self, key: str) -> Optional[str]:
        entry = self._live_entry(key)
        return entry[0] if entry else None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        expires_at = self._clock() + ttl if ttl and ttl > 0 else None
        self._cache[key] = (value, expires_at)
        return True

    async def delete(self, key: str) -> bool:
        if self._live_entry(key) is None:
            return False
        del self._cache[key]
        return True

    async def exists(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def increment(self, key: str) -> Optional[int]:
        entry = self._live_entry(key)
        if entry is None:
            value, expires_at = 1, None
        else:
            value, expires_at = int(entry[0]) + 1, entry[1]
        self._cache[key] = (str(value), expires_at)
        return value

    async def ttl(self, key: str) -> int:
        entry = self._live_entry(key)
        if entry is None:
            return -2
        if entry[1] is None:
            return -1
        return max(0, int(entry[1] - self._clock()))

    async def clear(self) -> bool:
        self._cache.clear()
        return True


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Every read is a miss, so every resolution goes to the database.
    """

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        return True

    async def delete(self, key: str) -> bool:
        return True

    async def exists(self, key: str) -> bool:
        return False

    async def increment(self, key: str) -> Optional[int]:
        return None

    async def ttl(self, key: str) -> int:
        return -2

    async def clear(self) -> bool:
        return True
