"""Cache manager: Redis with a bounded in-process fallback."""

import asyncio
import json
import threading
import time
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import redis
import structlog
from redis.connection import ConnectionPool
from redis.exceptions import ConnectionError, RedisError, TimeoutError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.config import Settings, settings

logger = structlog.get_logger(__name__)


class LocalTTLCache:
    """
    In-process LRU cache with per-entry TTL and a hard capacity bound.

    Every read and write takes ``self._lock``, so one instance can be shared
    by request handlers and worker threads.
    """

    def __init__(self, max_entries: int, default_ttl: int):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.default_ttl = default_ttl
        self._data: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= time.monotonic():
                del self._data[key]
                return None
            self._data.move_to_end(key)
            return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        expires_at = time.monotonic() + (ttl or self.default_ttl)
        with self._lock:
            self._data[key] = (expires_at, value)
            self._data.move_to_end(key)
            while len(self._data) > self.max_entries:
                evicted, _ = self._data.popitem(last=False)
                logger.debug("local_cache_evicted", key=evicted)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            now = time.monotonic()
            expired = [k for k, (expires_at, _) in self._data.items() if expires_at <= now]
            for key in expired:
                del self._data[key]
            return len(self._data)


class CacheManager:
    """
    Cache facade used by the API:
    - Redis with connection pooling when ``CACHE_ENABLED`` and reachable
    - Automatic retry logic with exponential backoff on Redis transport errors
    - Bounded ``LocalTTLCache`` when Redis is disabled or down
    - Single-flight ``get_or_set``: concurrent misses for one key share one factory call
    """

    def __init__(self, settings: Settings):
        """Initialize cache manager with settings."""
        self.settings = settings
        self.redis_enabled = settings.CACHE_ENABLED
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = None
        self._is_connected = False
        self._local = LocalTTLCache(settings.CACHE_MAX_ENTRIES, settings.CACHE_DEFAULT_TTL)
        self._inflight: Dict[str, asyncio.Lock] = {}

        logger.info("cache_manager_initialized", redis_enabled=self.redis_enabled)

    @property
    def backend(self) -> str:
        return "redis" if self._is_connected else "local"

    def connect(self) -> None:
        """Establish Redis connection, falling back to the local cache on failure."""
        if not self.redis_enabled:
            logger.info("redis_cache_disabled", fallback="local")
            return

        try:
            self._pool = ConnectionPool(
                host=self.settings.REDIS_HOST,
                port=self.settings.REDIS_PORT,
                db=self.settings.REDIS_DB,
                password=self.settings.REDIS_PASSWORD or None,
                max_connections=self.settings.REDIS_MAX_CONNECTIONS,
                socket_keepalive=self.settings.REDIS_SOCKET_KEEPALIVE,
                socket_timeout=self.settings.REDIS_SOCKET_TIMEOUT,
                retry_on_timeout=self.settings.REDIS_RETRY_ON_TIMEOUT,
                health_check_interval=self.settings.REDIS_HEALTH_CHECK_INTERVAL,
                decode_responses=True,
            )
            self._client = redis.Redis(connection_pool=self._pool)

            # Test connection
            self._client.ping()
            self._is_connected = True

            logger.info(
                "redis_cache_connected",
                host=self.settings.REDIS_HOST,
                port=self.settings.REDIS_PORT,
            )

        except RedisError as e:
            logger.error("redis_cache_connect_failed", error=str(e))
            logger.warning("cache_degraded", fallback="local")
            self._client = None
            self._is_connected = False

    def disconnect(self) -> None:
        """Close Redis connection and cleanup resources."""
        if self._client:
            try:
                self._client.close()
            except RedisError as e:
                logger.error("redis_close_failed", error=str(e))

        if self._pool:
            try:
                self._pool.disconnect()
            except RedisError as e:
                logger.error("redis_pool_disconnect_failed", error=str(e))

        self._client = None
        self._pool = None
        self._is_connected = False
        logger.info("cache_disconnected")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    def _redis_get(self, key: str) -> Optional[str]:
        return self._client.get(key)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    def _redis_setex(self, key: str, ttl: int, value: str) -> bool:
        return bool(self._client.setex(key, ttl, value))

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Returns:
            Cached value (deserialized from JSON for Redis) or None if missing/error
        """
        if not self._is_connected:
            return self._local.get(key)

        try:
            value = self._redis_get(key)
        except RedisError as e:
            logger.warning("redis_get_failed", key=key, error=str(e))
            return None

        if value is None:
            logger.debug("cache_miss", key=key)
            return None

        try:
            logger.debug("cache_hit", key=key)
            return json.loads(value)
        except json.JSONDecodeError as e:
            logger.error("cache_value_corrupt", key=key, error=str(e))
            self.delete(key)
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set value in cache with optional TTL (None = default TTL)."""
        ttl = ttl or self.settings.CACHE_DEFAULT_TTL

        if not self._is_connected:
            self._local.set(key, value, ttl)
            return True

        try:
            serialized_value = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            logger.error("cache_serialize_failed", key=key, error=str(e))
            return False

        try:
            result = self._redis_setex(key, ttl, serialized_value)
            logger.debug("cache_set", key=key, ttl=ttl)
            return result
        except RedisError as e:
            logger.warning("redis_set_failed", key=key, error=str(e))
            return False

    def delete(self, key: str) -> bool:
        """Delete key from cache."""
        if not self._is_connected:
            return self._local.delete(key)

        try:
            return bool(self._client.delete(key))
        except RedisError as e:
            logger.error("redis_delete_failed", key=key, error=str(e))
            return False

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None,
    ) -> Tuple[Any, bool]:
        """
        Get value from cache or compute and cache it if not present.

        Concurrent callers missing on the same key wait on one per-key lock,
        so ``factory`` runs once and the others read its result. Exceptions
        raised by ``factory`` propagate and nothing is cached.

        Returns:
            (value, hit) where ``hit`` is True when the value came from the cache
        """
        cached_value = self.get(key)
        if cached_value is not None:
            return cached_value, True

        lock = self._inflight.setdefault(key, asyncio.Lock())
        try:
            async with lock:
                cached_value = self.get(key)
                if cached_value is not None:
                    return cached_value, True

                value = await factory()
                if value is not None:
                    self.set(key, value, ttl)
                return value, False
        finally:
            if not lock.locked() and self._inflight.get(key) is lock:
                del self._inflight[key]

    def clear_all(self) -> bool:
        """Clear every cached entry (FLUSHDB on Redis)."""
        if not self._is_connected:
            self._local.clear()
            return True

        try:
            self._client.flushdb()
            logger.warning("cache_cleared")
            return True
        except RedisError as e:
            logger.error("redis_flush_failed", error=str(e))
            return False

    def size(self) -> int:
        """Number of live entries in the active backend."""
        if not self._is_connected:
            return len(self._local)
        try:
            return int(self._client.dbsize())
        except RedisError:
            return 0

    def get_stats(self) -> dict:
        """Cache statistics for the health endpoint."""
        stats = {
            "enabled": True,
            "backend": self.backend,
            "connected": self._is_connected,
            "size": self.size(),
        }
        if not self._is_connected:
            stats["capacity"] = self._local.max_entries
            return stats

        try:
            info = self._client.info("stats")
            hits = info.get("keyspace_hits", 0)
            misses = info.get("keyspace_misses", 0)
            stats.update(
                keyspace_hits=hits,
                keyspace_misses=misses,
                hit_rate=hits / (hits + misses) if (hits + misses) > 0 else 0,
            )
        except RedisError as e:
            logger.error("cache_stats_failed", error=str(e))
            stats["error"] = str(e)
        return stats


# Shared instance; connected/disconnected by the app lifespan
cache_manager = CacheManager(settings)
