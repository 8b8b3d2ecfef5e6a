"""Candidate Pool Cache - Redis caching for the matching candidate pool."""
import json
import logging
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from urllib.parse import urlparse

from redis import Redis
from redis.exceptions import RedisError

from core.config_loader import CacheConfig
from core.matching.interfaces import CandidatePoolCache
from core.matching.models import UserProfile

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except ValueError:
        return url


class RedisCandidatePoolCache(CandidatePoolCache):
    """
    Caches the serialized candidate pool in Redis under a single key.

    Entries expire after ttl_seconds. Backend errors are logged and reported
    as misses so the engine falls back to the ProfileStore.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        key_prefix: str = "candidate_pool"
    ):
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.key = f"{key_prefix}:all"
        self._redis: Optional[Redis] = None
        self._available = False

        try:
            self._redis = Redis.from_url(
                redis_url,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            self._redis.ping()
            self._available = True
            logger.info(f"Candidate cache connected to Redis at {_sanitize_url(redis_url)}")
        except RedisError as e:
            logger.warning(f"Candidate cache Redis unavailable: {e}")
            self._redis = None
            self._available = False

    @classmethod
    def from_config(cls, config: CacheConfig) -> "RedisCandidatePoolCache":
        return cls(
            redis_url=config.redis_url,
            password=config.password,
            ttl_seconds=config.ttl_seconds,
            key_prefix=config.key_prefix
        )

    @property
    def is_available(self) -> bool:
        """Check if cache is available."""
        if not self._available or not self._redis:
            return False
        try:
            return bool(self._redis.ping())
        except RedisError:
            return False

    def get_pool(self) -> Optional[List[UserProfile]]:
        """Get the cached candidate pool, or None on a miss."""
        if not self.is_available:
            return None

        try:
            data = self._redis.get(self.key)
            if not data:
                logger.debug("Cache miss for candidate pool")
                return None

            cache_entry = json.loads(data)
            profiles = [UserProfile.from_dict(p) for p in cache_entry.get("profiles", [])]
            logger.debug(f"Cache hit for candidate pool ({len(profiles)} profiles)")
            return profiles

        except (RedisError, ValueError, KeyError) as e:
            logger.warning(f"Error reading candidate pool from cache: {e}")
            return None

    def set_pool(self, profiles: List[UserProfile]) -> bool:
        """Cache the candidate pool with TTL."""
        if not self.is_available:
            return False

        try:
            cache_entry: Dict[str, Any] = {
                "profiles": [p.to_dict() for p in profiles],
                "cached_at": datetime.now(timezone.utc).isoformat(),
                "ttl_seconds": self.ttl_seconds
            }
            self._redis.setex(self.key, self.ttl_seconds, json.dumps(cache_entry))
            logger.debug(f"Cached candidate pool of {len(profiles)} profiles (TTL: {self.ttl_seconds}s)")
            return True

        except RedisError as e:
            logger.warning(f"Error writing candidate pool to cache: {e}")
            return False

    def invalidate(self) -> bool:
        """Drop the cached pool, e.g. after profile writes."""
        if not self.is_available:
            return False

        try:
            self._redis.delete(self.key)
            logger.debug("Invalidated cached candidate pool")
            return True
        except RedisError as e:
            logger.warning(f"Error invalidating candidate pool cache: {e}")
            return False
