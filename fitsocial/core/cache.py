"""
Redis caching layer for read-heavy views.

This provides:
1. Namespaced keys with per-layer TTLs
2. JSON serialization
3. Pattern invalidation driven by domain events
4. Hit/miss statistics

Every operation degrades to a no-op when Redis is unavailable, so the
service keeps working (uncached) without it.
"""

import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis

from fitsocial.config import settings

logger = logging.getLogger(__name__)

LEADERBOARD_NAMESPACE = "leaderboard"


class CacheManager:
    """
    Redis cache manager.

    Features:
    - Multi-level TTL management
    - Automatic serialization/deserialization
    - Cache invalidation patterns
    - Performance monitoring
    """

    def __init__(self):
        self.redis_client = None
        self._connection_pool = None

        self.default_ttl = settings.redis_cache_ttl
        self.key_prefix = "fitsocial:"

        self.cache_stats = {"hits": 0, "misses": 0, "sets": 0, "deletes": 0}

        self.cache_layers = {
            "hot": 60,  # leaderboards, feeds
            "warm": 300,
            "cold": 3600,
        }

    async def connect(self):
        """Establish the Redis connection pool and verify it with a ping."""
        try:
            connection_kwargs = {
                "max_connections": 20,
                "retry_on_timeout": True,
                "decode_responses": False,
                "socket_keepalive": True,
            }

            if settings.redis_ssl:
                connection_kwargs["ssl"] = True
                connection_kwargs["ssl_cert_reqs"] = None

            if settings.is_aws_environment:
                connection_kwargs.update(
                    {
                        "socket_connect_timeout": 10,
                        "socket_timeout": 30,
                        "health_check_interval": 30,
                    }
                )

            self._connection_pool = redis.ConnectionPool.from_url(
                settings.redis_url, **connection_kwargs
            )
            self.redis_client = redis.Redis(connection_pool=self._connection_pool)

            await self.redis_client.ping()
            logger.info("Redis connection established")

        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self.redis_client = None
            raise ConnectionError(f"Redis connection failed: {e}")

    async def disconnect(self):
        """Clean up Redis connections."""
        if self.redis_client:
            await self.redis_client.close()
        if self._connection_pool:
            await self._connection_pool.disconnect()
        self.redis_client = None

    def _generate_key(self, key: str, namespace: str = "") -> str:
        if namespace:
            return f"{self.key_prefix}{namespace}:{key}"
        return f"{self.key_prefix}{key}"

    def _serialize_value(self, value: Any) -> bytes:
        # Datetimes and other scalars fall back to their string form
        return json.dumps(value, default=str).encode("utf-8")

    def _deserialize_value(self, value: bytes) -> Any:
        try:
            return json.loads(value.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Failed to deserialize cache value: {e}")
            return None

    async def get(self, key: str, namespace: str = "") -> Optional[Any]:
        """
        Get value from cache.

        Returns:
            Cached value or None if not found
        """
        if not self.redis_client:
            return None

        try:
            cache_key = self._generate_key(key, namespace)
            value = await self.redis_client.get(cache_key)

            if value is not None:
                self.cache_stats["hits"] += 1
                return self._deserialize_value(value)
            else:
                self.cache_stats["misses"] += 1
                return None

        except Exception as e:
            logger.error(f"Cache get error for key {key}: {e}")
            self.cache_stats["misses"] += 1
            return None

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
        namespace: str = "",
        cache_layer: str = "warm",
    ) -> bool:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl: Time to live in seconds (overrides cache_layer)
            namespace: Optional namespace
            cache_layer: Cache layer determining TTL

        Returns:
            True if successfully set
        """
        if not self.redis_client:
            return False

        try:
            cache_key = self._generate_key(key, namespace)
            serialized_value = self._serialize_value(value)

            if ttl is None:
                ttl = self.cache_layers.get(cache_layer, self.default_ttl)

            await self.redis_client.setex(cache_key, ttl, serialized_value)
            self.cache_stats["sets"] += 1
            return True

        except Exception as e:
            logger.error(f"Cache set error for key {key}: {e}")
            return False

    async def delete(self, key: str, namespace: str = "") -> bool:
        if not self.redis_client:
            return False

        try:
            cache_key = self._generate_key(key, namespace)
            result = await self.redis_client.delete(cache_key)
            if result > 0:
                self.cache_stats["deletes"] += 1
            return result > 0

        except Exception as e:
            logger.error(f"Cache delete error for key {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str, namespace: str = "") -> int:
        """
        Delete all keys matching a pattern.

        Returns:
            Number of keys deleted
        """
        if not self.redis_client:
            return 0

        try:
            search_pattern = self._generate_key(pattern, namespace)
            keys = await self.redis_client.keys(search_pattern)

            if keys:
                deleted = await self.redis_client.delete(*keys)
                self.cache_stats["deletes"] += deleted
                return deleted
            return 0

        except Exception as e:
            logger.error(f"Cache pattern delete error for pattern {pattern}: {e}")
            return 0

    def get_stats(self) -> Dict[str, Any]:
        """Cache performance statistics."""
        lookups = self.cache_stats["hits"] + self.cache_stats["misses"]
        hit_rate = self.cache_stats["hits"] / lookups if lookups > 0 else 0

        return {
            **self.cache_stats,
            "total_operations": sum(self.cache_stats.values()),
            "hit_rate": round(hit_rate, 4),
            "miss_rate": round(1 - hit_rate, 4),
        }


class CacheInvalidator:
    """
    Maps domain events to the cache entries they make stale.

    score_changed: any activity score moved, so every cached leaderboard
    page is stale.
    """

    def __init__(self, cache_manager: CacheManager):
        self.cache = cache_manager
        self.invalidation_patterns = {
            "score_changed": [(LEADERBOARD_NAMESPACE, "*")],
        }

    async def invalidate_for_event(self, event_type: str) -> int:
        deleted = 0
        for namespace, pattern in self.invalidation_patterns.get(event_type, []):
            deleted += await self.cache.delete_pattern(pattern, namespace=namespace)

        if deleted:
            logger.info(f"Invalidated {deleted} cache entries for event: {event_type}")
        return deleted


# Global instances
cache_manager = CacheManager()
cache_invalidator = CacheInvalidator(cache_manager)


async def init_cache():
    await cache_manager.connect()
    logger.info("Cache system initialized successfully")


async def cleanup_cache():
    await cache_manager.disconnect()
    logger.info("Cache system cleaned up")
