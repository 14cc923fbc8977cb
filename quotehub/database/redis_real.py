"""
Real Redis-backed cache for production when REDIS_URL is set.
Implements the same interface as quotehub.database.redis (in-memory stub).
"""

from __future__ import annotations

from typing import Optional

import redis


class RedisCache:
    """
    Redis-backed key/value cache. Use when REDIS_URL is set in production.
    """

    def __init__(self, url: str, default_ttl: int = 30 * 24 * 3600) -> None:
        self._client = redis.from_url(url, decode_responses=True)
        self._default_ttl = default_ttl

    def get(self, key: str) -> Optional[str]:
        raw = self._client.get(key)
        if raw is None:
            return None
        return raw

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        self._client.setex(key, ttl or self._default_ttl, value)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def ping(self) -> bool:
        try:
            return self._client.ping()
        except redis.RedisError:
            return False
