"""
TTL缓存
适配器私有的简单过期缓存（如gas价格缓存），读取时检查过期
"""

import threading
import time
from typing import Callable, Generic, Hashable, Optional, TypeVar

T = TypeVar("T")


class CacheEntry(Generic[T]):
    """缓存条目"""

    __slots__ = ("data", "expires_at")

    def __init__(self, data: T, ttl: float, now: float):
        self.data = data
        self.expires_at = now + ttl

    def is_expired(self, now: float) -> bool:
        """检查是否过期"""
        return now >= self.expires_at


class TTLCache(Generic[T]):
    """key -> (value, 过期时间戳) 的缓存，由单个适配器独占"""

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[T]:
        """读取缓存，过期条目会被删除并返回None"""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._entries[key]
                return None
            return entry.data

    def set(self, key: Hashable, value: T, ttl: Optional[float] = None) -> None:
        """写入缓存"""
        with self._lock:
            self._entries[key] = CacheEntry(
                value, self.ttl if ttl is None else ttl, self._clock()
            )

    def invalidate(self, key: Hashable) -> bool:
        """删除指定缓存"""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for e in self._entries.values() if not e.is_expired(now))
