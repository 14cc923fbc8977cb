"""
Lightweight in-memory RedisCache replacement for local development.

Implements the small get/set/ping interface used by the translation cache
and the vehicle-group cache so the API runs without a real Redis instance.
"""

from __future__ import annotations

import threading
import time
from typing import Dict, Optional, Tuple


class RedisCache:
    def __init__(self) -> None:
        # key -> (value, expires_at monotonic seconds or None)
        self._store: Dict[str, Tuple[str, Optional[float]]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and expires_at <= time.monotonic():
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        expires_at = time.monotonic() + ttl if ttl else None
        with self._lock:
            self._store[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def ping(self) -> bool:
        """
        Health check calls this; always return True so the API reports
        the cache as "connected" in local/dev mode.
        """
        return True
