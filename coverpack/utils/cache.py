"""Lightweight in-memory cache for template packs and font bytes."""

from __future__ import annotations

import time
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Dict, Optional


@dataclass
class _CacheEntry:
    value: Any
    expires_at: Optional[float]

    def is_expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() >= self.expires_at


class Cache:
    """Thread-safe cache with optional TTL and size control.

    A ``ttl`` of 0 keeps entries for the life of the process.
    """

    def __init__(self, max_size: int = 64, ttl: int = 0) -> None:
        self.max_size = max(1, int(max_size))
        self.default_ttl = max(0, int(ttl))
        self._entries: Dict[str, _CacheEntry] = {}
        self._lock = RLock()

    def _prune_expired(self) -> None:
        expired_keys = [key for key, entry in self._entries.items() if entry.is_expired()]
        for key in expired_keys:
            self._entries.pop(key, None)

    def _ensure_capacity(self) -> None:
        # dicts keep insertion order, so the first keys are the oldest
        while len(self._entries) > self.max_size:
            oldest = next(iter(self._entries))
            self._entries.pop(oldest, None)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired():
                self._entries.pop(key, None)
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl_to_use = self.default_ttl if ttl is None else max(0, int(ttl))
        expires_at = time.monotonic() + ttl_to_use if ttl_to_use else None
        with self._lock:
            self._prune_expired()
            self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)
            self._ensure_capacity()

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def get_or_set(self, key: str, factory: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        with self._lock:
            cached = self.get(key)
            if cached is not None:
                return cached
            value = factory()
            self.set(key, value, ttl=ttl)
            return value
