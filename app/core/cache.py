"""
Redis cache client.

Caching is an optimisation only: every failure is logged and reported as a
cache miss so callers keep working when Redis is down.
"""

import json
from typing import Any, Optional

import redis

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class RedisClient:
    """Lazily created, process-wide Redis connection."""

    _client: Optional[redis.Redis] = None

    @classmethod
    def get_client(cls) -> Optional[redis.Redis]:
        if not settings.REDIS_ENABLED:
            return None
        if cls._client is None:
            cls._client = redis.Redis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
                socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
            )
            logger.info("Redis client created")
        return cls._client

    @classmethod
    def ping(cls) -> bool:
        client = cls.get_client()
        if client is None:
            return False
        try:
            return bool(client.ping())
        except redis.RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    @classmethod
    def get_json(cls, key: str) -> Optional[Any]:
        client = cls.get_client()
        if client is None:
            return None
        try:
            raw = client.get(key)
        except redis.RedisError as e:
            logger.warning(f"Redis GET {key} failed: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            return None

    @classmethod
    def set_json(cls, key: str, value: Any, ttl_seconds: int) -> bool:
        client = cls.get_client()
        if client is None:
            return False
        try:
            client.set(key, json.dumps(value, default=str), ex=ttl_seconds)
            return True
        except redis.RedisError as e:
            logger.warning(f"Redis SET {key} failed: {e}")
            return False

    @classmethod
    def close(cls) -> None:
        if cls._client is not None:
            cls._client.close()
            cls._client = None


def stats_cache_key(day: str) -> str:
    return f"attendance:stats:{day}"
