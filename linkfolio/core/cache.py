import json
import threading
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

import redis

from linkfolio.core.config import settings


_client: Optional[redis.Redis] = None


def get_client() -> Optional[redis.Redis]:
    global _client
    if _client is not None:
        return _client
    if not settings.REDIS_URL:
        return None
    _client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
    return _client


def cache_get(key: str) -> Optional[Any]:
    client = get_client()
    if client is None:
        return None
    data = client.get(key)
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError:
        return None


def cache_set(key: str, value: Any, ttl: Optional[int] = None) -> None:
    client = get_client()
    if client is None:
        return
    payload = json.dumps(value, ensure_ascii=False, default=str)
    client.setex(key, ttl or settings.CACHE_TTL_SECONDS, payload)


def cache_delete(key: str) -> None:
    client = get_client()
    if client is None:
        return
    client.delete(key)


class KeyValueCache(Protocol):
    """Small get/set/invalidate contract for TTL caches keyed by string."""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def invalidate(self, key: str) -> None: ...


class InMemoryTTLCache:
    """Process-local TTL cache. Each instance of the API has its own copy."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            now = self._clock()
            expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
            for k in expired:
                del self._entries[k]
            self._entries[key] = (now + self.ttl_seconds, value)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class RedisTTLCache:
    """Shared TTL cache backed by Redis; values must be JSON-serialisable dicts."""

    def __init__(self, ttl_seconds: int, prefix: str):
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def get(self, key: str) -> Optional[Any]:
        return cache_get(self._key(key))

    def set(self, key: str, value: Any) -> None:
        cache_set(self._key(key), value, ttl=self.ttl_seconds)

    def invalidate(self, key: str) -> None:
        cache_delete(self._key(key))
