"""Key-value stores with per-key expiry for temporary login codes."""
import threading
import time
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Dict, Optional, Tuple

import redis

from app.core.config import settings


class LoginCodeStore(ABC):
    """Minimal key-value store with per-key TTL."""

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value under key, expiring after ttl_seconds."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value for key, or None if missing or expired."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""

    @abstractmethod
    def pop(self, key: str) -> Optional[str]:
        """Remove key and return its value in one step, or None if missing or expired."""


class RedisLoginCodeStore(LoginCodeStore):
    """Store backed by Redis; expiry is handled by the server."""

    def __init__(self, client: redis.Redis, prefix: str = "login-code:"):
        self.client = client
        self.prefix = prefix

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.client.setex(self.prefix + key, ttl_seconds, value)

    def get(self, key: str) -> Optional[str]:
        value = self.client.get(self.prefix + key)
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else value

    def delete(self, key: str) -> None:
        self.client.delete(self.prefix + key)

    def pop(self, key: str) -> Optional[str]:
        # GETDEL reads and deletes atomically on the server
        value = self.client.getdel(self.prefix + key)
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else value


class InMemoryLoginCodeStore(LoginCodeStore):
    """Process-local store for single-instance deployments and tests."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._data: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            now = self._clock()
            # Codes that expire unread are only dropped here
            for expired in [k for k, (_, expires_at) in self._data.items() if now >= expires_at]:
                del self._data[expired]
            self._data[key] = (value, now + ttl_seconds)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._data[key]
                return None
            return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def pop(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._data.pop(key, None)
            if entry is None:
                return None
            value, expires_at = entry
            return value if self._clock() < expires_at else None


@lru_cache
def get_login_code_store() -> LoginCodeStore:
    """Return the configured store (Redis when REDIS_URL is set)."""
    if settings.REDIS_URL:
        return RedisLoginCodeStore(redis.Redis.from_url(settings.REDIS_URL, decode_responses=True))
    return InMemoryLoginCodeStore()
