import redis
import json
import logging
from typing import Any, Optional
from .config import settings

logger = logging.getLogger(__name__)


class CacheManager:
    """Redis-backed cache. Every failure degrades to a cache miss."""

    def __init__(self, redis_url: Optional[str] = None, enabled: Optional[bool] = None):
        self.redis_url = redis_url or settings.redis_url
        self.default_ttl = settings.cache_default_ttl
        self.enabled = settings.cache_enabled if enabled is None else enabled
        self._client = None

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True
            )
        return self._client

    def _serialize_value(self, value: Any) -> str:
        return json.dumps(value, default=str)

    def _deserialize_value(self, value: str) -> Any:
        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Cache deserialization error: {e}")
            return None

    def get(self, key: str) -> Optional[Any]:
        if not self.enabled:
            return None
        try:
            value = self.client.get(key)
            return self._deserialize_value(value) if value else None
        except redis.RedisError as e:
            logger.warning(f"Cache get error for key '{key}': {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        if not self.enabled:
            return False
        try:
            ttl = ttl or self.default_ttl
            return bool(self.client.setex(key, ttl, self._serialize_value(value)))
        except redis.RedisError as e:
            logger.warning(f"Cache set error for key '{key}': {e}")
            return False

    def delete(self, key: str) -> bool:
        if not self.enabled:
            return False
        try:
            return bool(self.client.delete(key))
        except redis.RedisError as e:
            logger.warning(f"Cache delete error for key '{key}': {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern"""
        if not self.enabled:
            return 0
        try:
            keys = list(self.client.scan_iter(match=pattern))
            if keys:
                return self.client.delete(*keys)
            return 0
        except redis.RedisError as e:
            logger.warning(f"Cache delete pattern error for '{pattern}': {e}")
            return 0

    def health_check(self) -> bool:
        if not self.enabled:
            return False
        try:
            return bool(self.client.ping())
        except redis.RedisError:
            return False

    def close(self):
        if self._client is not None:
            self._client.close()
            self._client = None


cache = CacheManager()
